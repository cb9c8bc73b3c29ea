"""Thread-safe lists and sets."""