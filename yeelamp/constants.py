"""
Shared constants for the Yeelight LAN control library.
"""

# TCP port the lamp listens on once LAN control is enabled in the app.
LAMP_PORT = 55443

# Requests and responses are single lines terminated by CRLF.
LINE_TERMINATOR = "\r\n"

# Request ids are an 8-bit wrapping counter.
ID_MODULUS = 256

# Shortest smooth transition the lamp accepts, in milliseconds.
MIN_SMOOTH_MS = 30

# Saturation sent with set_hsv when only the hue is given.
DEFAULT_SATURATION = 100

# Connection defaults (seconds), used when the config omits them.
DEFAULT_IO_TIMEOUT = 5.0
DEFAULT_CONNECTION_WAIT = 5.0
DEFAULT_CONNECTION_TIMEOUT = 5.0
DEFAULT_CONNECTION_TRIES = 3

CONFIG_DIR_NAME = ".yeelamp"
CONFIG_FILE_NAME = "config.toml"

# A response line longer than this is dropped along with the session.
MAX_RESPONSE_BYTES = 64 * 1024
