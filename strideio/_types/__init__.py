from strideio._types.base import *
from strideio._types import columns as special_columns
from strideio._types.runningdata import RunningData
