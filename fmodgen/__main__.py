import argparse
import sys

from fmodgen import FmodGen
from fmodgen.errors import FmodGenError


def parse_generate(parser):
    parser.add_argument(
        'sdk_root',
        nargs='?',
        default='./fmod',
        help='The FMOD SDK root containing api/ and doc/, default to ./fmod'
    )

    parser.add_argument(
        'output_dir',
        nargs='?',
        default='../libfmod/src',
        help='The directory to write ffi.rs and lib.rs into, default to ../libfmod/src'
    )

    parser.add_argument(
        '--config',
        '-c',
        type=str,
        dest='config_file',
        help='The configuration file to use'
    )


def generate(parser, args):
    generator = None
    try:
        generator = FmodGen(args.sdk_root, args.output_dir, config_file=args.config_file)
        generator.run()
    except (FmodGenError, OSError) as e:
        stage = generator.stage if generator is not None else 'configuration'
        print(f'❌ {stage} failed: {e}', file=sys.stderr)
        sys.exit(1)

    print(f'✅ Bindings generated in {args.output_dir}')


def main():
    parser = argparse.ArgumentParser(
        description='fmodgen: Rust bindings generator for the FMOD Engine'
    )

    parse_generate(parser)

    args = parser.parse_args()
    generate(parser, args)


if __name__ == '__main__':
    main()
