"""Cleaners that find junk paths in well-known macOS locations."""