"""Command-line interface for purestex"""
import sys
import argparse
import time
from pathlib import Path, PurePosixPath
import imageio.v3 as iio

from .enums import PicaDataType, PicaPixelFormat
from .metadata import ImageMetadata, DATA_TYPE_NAMES, PIXEL_FORMAT_NAMES, parse_enum
from .registry import encodable_format, lookup
from .stex import STEX

# Leftover effect textures shipped alongside the game data
EXCLUDED_DIRECTORIES = ('effect/tex', 'effect_editor')


def main(argv=None):
    """Command-line interface for purestex"""
    parser = argparse.ArgumentParser(
        prog='purestex',
        description='Read and convert STEX (PICA200 native) texture files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  purestex info texture.stex                                  # Display STEX file info
  purestex decode texture.stex -o texture.png                 # Convert to PNG
  purestex encode texture.png -o texture.stex -t UnsignedByte -f RGBANativeDMP
  purestex extract romfs/ work/                               # STEX tree to PNG+JSON tree
  purestex build work/ patched/ --ignore-untranslated         # PNG+JSON tree back to STEX
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    info_parser = subparsers.add_parser('info', help='Display STEX file info')
    info_parser.add_argument('input', help='Input STEX file path')

    decode_parser = subparsers.add_parser('decode', help='Convert an STEX file to an image')
    decode_parser.add_argument('input', help='Input STEX file path')
    decode_parser.add_argument('-o', '--output', required=True, help='Output image file path (e.g., output.png)')

    encode_parser = subparsers.add_parser('encode', help='Convert an image to an STEX file')
    encode_parser.add_argument('input', help='Input image file path')
    encode_parser.add_argument('-o', '--output', required=True, help='Output STEX file path')
    encode_parser.add_argument('-t', '--data-type', default='UnsignedByte',
                               help='Data type name or code (default: UnsignedByte)')
    encode_parser.add_argument('-f', '--pixel-format', default='RGBANativeDMP',
                               help='Pixel format name or code (default: RGBANativeDMP)')

    extract_parser = subparsers.add_parser('extract', help='Convert STEX files to PNG+JSON files')
    extract_parser.add_argument('source', help='Directory searched recursively for .stex files')
    extract_parser.add_argument('target', help='Directory receiving PNG and JSON files')
    extract_parser.add_argument('--overwrite', action='store_true', help='Allow overwriting of existing files')

    build_parser = subparsers.add_parser('build', help='Convert PNG+JSON files to STEX files')
    build_parser.add_argument('source', help='Directory searched recursively for .json files')
    build_parser.add_argument('target', help='Directory receiving STEX files')
    build_parser.add_argument('--overwrite', action='store_true', help='Allow overwriting of existing files')
    build_parser.add_argument('--ignore-untranslated', action='store_true',
                              help='Skip textures whose translation image equals the original')

    args = parser.parse_args(argv)

    try:
        if args.command == 'info':
            print(STEX.from_bytes(Path(args.input).read_bytes()))
        elif args.command == 'decode':
            decode_file(args.input, args.output)
        elif args.command == 'encode':
            encode_file(args.input, args.output, args.data_type, args.pixel_format)
        elif args.command == 'extract':
            start = time.perf_counter()
            count = extract_directory(Path(args.source), Path(args.target), args.overwrite)
            print(f"\nTotal textures extracted: {count}")
            print(f"Operation completed in {(time.perf_counter() - start)*1000:.2f} ms")
        elif args.command == 'build':
            start = time.perf_counter()
            count = build_directory(Path(args.source), Path(args.target), args.overwrite, args.ignore_untranslated)
            print(f"\nTotal textures built: {count}")
            print(f"Operation completed in {(time.perf_counter() - start)*1000:.2f} ms")

    except FileNotFoundError as e:
        print(f"Error: File '{e.filename}' not found")
        sys.exit(1)
    except NotImplementedError as e:
        print(f"Cannot convert: {e}")
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)


def decode_file(input_path, output_path) -> None:
    """Decode one STEX file to an image file"""
    stex = STEX.from_bytes(Path(input_path).read_bytes())
    print(stex)

    start_decode = time.perf_counter()
    image = stex.to_image()
    decode_time = time.perf_counter() - start_decode

    start_save = time.perf_counter()
    iio.imwrite(output_path, image)
    save_time = time.perf_counter() - start_save

    print(f"\nSaved to: {output_path}")
    print(f"Image size: {image.shape[1]}x{image.shape[0]}")
    print(f"Decode time: {decode_time*1000:.2f} ms")
    print(f"Save time: {save_time*1000:.2f} ms")


def encode_file(input_path, output_path, data_type, pixel_format) -> None:
    """Encode one image file to an STEX file, substituting decode-only formats"""
    data_type = parse_enum(data_type, PicaDataType, DATA_TYPE_NAMES)
    pixel_format = parse_enum(pixel_format, PicaPixelFormat, PIXEL_FORMAT_NAMES)
    data_type, pixel_format = _substitute_format(data_type, pixel_format)

    image = iio.imread(input_path)

    start_encode = time.perf_counter()
    stex = STEX.from_image(image, data_type, pixel_format)
    encode_time = time.perf_counter() - start_encode

    Path(output_path).write_bytes(stex.to_bytes())
    print(stex)
    print(f"\nSaved to: {output_path}")
    print(f"Encode time: {encode_time*1000:.2f} ms")


def extract_directory(source_root: Path, target_root: Path, overwrite: bool = False) -> int:
    """
    Convert every STEX file below source_root to PNG+JSON under target_root

    Each texture yields "NAME.json", "NAME (Original).png" and
    "NAME (Translation).png" in the mirrored relative directory.

    Returns:
        Number of textures converted
    """
    count = 0
    for stex_file in sorted(source_root.rglob('*.stex')):
        relative_dir = stex_file.parent.relative_to(source_root)
        if any(excluded in relative_dir.as_posix() for excluded in EXCLUDED_DIRECTORIES):
            continue

        output_dir = target_root / relative_dir
        json_path = output_dir / f"{stex_file.stem}.json"
        original_path = output_dir / f"{stex_file.stem} (Original).png"
        translation_path = output_dir / f"{stex_file.stem} (Translation).png"

        if not all(_okay_to_write(path, overwrite) for path in (json_path, original_path, translation_path)):
            continue

        print(f"[*] Converting STEX {stex_file.name} to PNG+JSON...")
        try:
            stex = STEX.from_bytes(stex_file.read_bytes())
            image = stex.to_image()
        except (ValueError, NotImplementedError) as e:
            print(f"[!] Cannot convert {stex_file.name}: {e}")
            continue

        codec = stex.codec
        metadata = ImageMetadata(
            relative_path=(PurePosixPath(relative_dir.as_posix()) / stex_file.name).as_posix(),
            width=stex.width,
            height=stex.height,
            data_type=codec.data_type,
            pixel_format=codec.pixel_format,
        )

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            iio.imwrite(original_path, image)
            iio.imwrite(translation_path, image)
            metadata.save(json_path)
        except OSError as e:
            print(f"[!] Cannot write {stex_file.name}: {e}")
            continue

        count += 1

    return count


def build_directory(source_root: Path, target_root: Path, overwrite: bool = False,
                    ignore_untranslated: bool = False) -> int:
    """
    Convert every PNG+JSON pair below source_root back to STEX under target_root

    The "(Translation)" image is encoded with the format recorded in the
    sidecar; decode-only formats are replaced via encodable_format().

    Returns:
        Number of STEX files written
    """
    count = 0
    for json_file in sorted(source_root.rglob('*.json')):
        try:
            metadata = ImageMetadata.load(json_file)
        except ValueError as e:
            print(f"[!] Cannot read metadata {json_file.name}: {e}")
            continue

        relative_path = PurePosixPath(metadata.relative_path)
        image_dir = source_root / relative_path.parent
        original_path = image_dir / f"{relative_path.stem} (Original).png"
        translation_path = image_dir / f"{relative_path.stem} (Translation).png"

        if ignore_untranslated and _same_file_contents(original_path, translation_path):
            print(f"[-] File {json_file.name} has no translation, skipping...")
            continue

        output_path = target_root / relative_path
        if not _okay_to_write(output_path, overwrite):
            continue

        print(f"[*] Converting PNG+JSON {json_file.name} to STEX...")
        try:
            data_type, pixel_format = _substitute_format(metadata.data_type, metadata.pixel_format)
            image = iio.imread(translation_path)
            stex = STEX.from_image(image, data_type, pixel_format)
            if (stex.width, stex.height) != (metadata.width, metadata.height):
                raise ValueError(
                    f"image is {stex.width}x{stex.height}, metadata expects {metadata.width}x{metadata.height}"
                )
        except (OSError, ValueError, NotImplementedError) as e:
            print(f"[!] Cannot convert {json_file.name}: {e}")
            continue

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(stex.to_bytes())
        count += 1

    return count


def _substitute_format(data_type, pixel_format):
    substitute = encodable_format(data_type, pixel_format)
    if substitute != (data_type, pixel_format):
        print(f"[+] Original STEX was {lookup(data_type, pixel_format).name}, "
              f"encoding to {lookup(*substitute).name} instead...")
    return substitute


def _okay_to_write(path: Path, overwrite: bool) -> bool:
    if path.exists() and not overwrite:
        print(f"[-] File {path.name} already exists, skipping...")
        return False
    return True


def _same_file_contents(first: Path, second: Path) -> bool:
    if not first.exists() or not second.exists():
        return False
    return first.stat().st_size == second.stat().st_size and first.read_bytes() == second.read_bytes()


if __name__ == "__main__":
    main()
