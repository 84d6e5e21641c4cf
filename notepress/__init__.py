"""Notepress: single-author blog for math and competitive-programming notes."""
