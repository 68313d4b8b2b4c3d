# app/schemas/document.py
from pydantic import StrictBool, StrictFloat, StrictInt, StrictStr
from typing import Dict, Optional, Union

# Closed set of value kinds a document field may hold: a scalar, or one
# level of {inner key: scalar} sub-document.
Scalar = Optional[Union[StrictBool, StrictInt, StrictFloat, StrictStr]]
FieldValue = Union[Scalar, Dict[str, Scalar]]
UpdatePayload = Dict[str, FieldValue]
