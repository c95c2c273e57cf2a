import sys
from pathlib import Path

def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: corrupt_one_byte.py <macbinary file> [offset]")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if len(b) < 128:
        print("File too small to hold a MacBinary header.")
        raise SystemExit(2)

    # Flip one bit inside the CRC-covered part of the header (bytes 0..123).
    # The default lands in the file type field so the magic checks still pass
    # and only the CRC check can catch it.
    idx = int(sys.argv[2]) if len(sys.argv) == 3 else 65
    if not 0 <= idx < 124:
        print("Offset must be within the first 124 bytes.")
        raise SystemExit(2)
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 bit at offset {idx} in {p}")

if __name__ == "__main__":
    main()
