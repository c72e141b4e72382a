"""
Test suite for gdconvert.

- Unit tests for the descriptor codec, IP.BIN decoder, cue handling,
  byte providers and the redump converter
- Integration tests converting synthetic images end to end
"""
