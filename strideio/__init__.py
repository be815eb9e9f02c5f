__version__ = '0.1.0'

import logging

# Library code: leave handler configuration to the application.
logging.getLogger(__name__).addHandler(logging.NullHandler())
