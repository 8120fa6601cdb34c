from ..core.writable import IntWritable, LongWritable, Text, Writable, key_converter
from ._drm import drm_parallelize, drm_parallelize_with_row_labels, drm_wrap
from ._store import MemoryRowStore
