from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Money stays Decimal internally; clients receive plain JSON numbers.
JsonAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
