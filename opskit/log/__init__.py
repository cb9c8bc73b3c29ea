"""Levelled logging with stdout, stderr, per-severity file and multi backends."""