"""
Benchmark suite for exactjson parsing performance.

Compares exactjson against other JSON libraries:
- Python standard library json
- orjson
- ujson

Measures parsing speed, and the peak memory of eager against streaming
parsing.
"""
