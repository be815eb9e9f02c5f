"""
Decode running data from Flexible and Interoperable data Transfer (FIT)
files [1]_.

This subpackage is a small, running-focused decoder: it walks the
message stream, keeps just enough of the FIT profile to name record
fields, works out what developer fields (Stryd and the like) hold, and
converts raw values into physical units.

The layers, leaves first:

    `_profile`    constants and the base type table
    `_codec`      single values out of a payload
    `_protocol`   file header and message stream
    `_devfields`  developer field names (metadata, or a guess)
    `_units`      raw values --> physical units
    `_reading`    records --> `RunningDataPoint`s --> `RunningData`


.. [1] https://developer.garmin.com/fit/protocol/

"""
from strideio.fit._reading import read_and_format as read
from strideio.fit._reading import (
    gen_records, gen_running_points, RunningDataPoint)
from strideio.fit._protocol import (
    gen_fit_messages, read_file_header, FitFile, DataMessage,
    DefinitionMessage)
