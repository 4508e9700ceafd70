from .errors import error_response
from .json import dumps_bytes, loads
