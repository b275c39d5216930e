# Decodes an IMF, RAW, DRO or VGM file and prints what's in it

import argparse
import sys
from oplplayer import decode
from oplplayer.byte_util import hexdump, read_binary_file


def main():
    parser = argparse.ArgumentParser(description="Dump the OPL register writes in a music file.")
    parser.add_argument('filename', help='IMF, RAW, DRO or VGM file')
    parser.add_argument('-r', '--imf-rate', type=int, default=560, help='IMF ticks per second')
    parser.add_argument('-l', '--loop-repeat', type=int, default=1, help='extra VGM loop passes')
    parser.add_argument('-c', '--csv', help='write the commands to this CSV file')
    parser.add_argument('-x', '--hex', action='store_true', help='hexdump the file header')
    parser.add_argument('-v', '--verbose', action='store_true', help='print header details')
    args = parser.parse_args()

    binary = read_binary_file(args.filename)
    if binary is None:
        print('Error: Can\'t open "%s"' % (args.filename))
        sys.exit(1)

    if args.hex:
        hexdump(binary[:0x80])

    decoder, stream = decode(binary, imf_rate=args.imf_rate, loop_repeat=args.loop_repeat,
                             verbose=args.verbose)
    if not args.verbose:
        for msg in decoder.diagnostics:
            print(msg)
    print('%s: %s' % (decoder.opl_type(), stream.summary()))

    if args.csv:
        stream.to_csv_file(args.csv)
    else:
        for c in stream:
            print('%10d  %03X  %02X' % (c.time, c.register, c.value))

    if stream.is_empty() and decoder.diagnostics:
        sys.exit(1)


if __name__ == '__main__':
    main()
