import math
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from btcchina.connector.btc_china import btc_china_constants as CONSTANTS
from btcchina.exceptions import BTCChinaValidationError

SCALAR_PARAM_TYPES = (str, bool, int, float, Decimal)


def construct_param_array(args: Sequence[Any], max_args: int) -> List[Any]:
    """
    Builds the positional `params` list of a private request.
    `args[0]` is the caller's own slot and is never included; positions 1 to `max_args` are copied in order
    until the first absent (`None` or missing) value. Anything after a gap is dropped, so optional arguments
    have to be supplied densely from the left.
    :param args: the caller's positional arguments, leading slot included
    :param max_args: the maximum number of parameters the wire method accepts
    :return: the ordered parameter list
    """
    param_array = []
    for i in range(1, max_args + 1):
        if i >= len(args) or args[i] is None:
            break
        param_array.append(args[i])
    return param_array


def validate_scalar_params(params: Iterable[Any]):
    """
    Raises `BTCChinaValidationError` for any param that is not a string, a boolean or a finite number
    """
    for param in params:
        if not isinstance(param, SCALAR_PARAM_TYPES):
            raise BTCChinaValidationError(
                f"The param {param!r} of type {type(param).__name__} must be a string, a number or a boolean.")
        finite = param.is_finite() if isinstance(param, Decimal) else not isinstance(param, float) or math.isfinite(param)
        if not finite:
            raise BTCChinaValidationError(f"The param {param!r} must be a finite number.")


def param_to_str(value: Any) -> str:
    """
    Renders a scalar parameter the way the exchange renders it when checking the signature
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def json_param(value: Any) -> Any:
    if isinstance(value, Decimal):
        return format(value, "f")
    return value


def query_param(value: Any) -> Any:
    # aiohttp only accepts str, int and float query values
    if isinstance(value, (bool, Decimal)) or value is None:
        return param_to_str(value)
    return value


class BTCChinaConfigMap(BaseModel):
    model_config = ConfigDict(validate_assignment=True, extra="forbid", title="btc_china")

    connector: str = Field(default=CONSTANTS.EXCHANGE_NAME)
    api_key: Optional[SecretStr] = Field(
        default=None,
        json_schema_extra={
            "prompt": "Enter your BTC China API key",
            "is_secure": True,
            "is_connect_key": True,
        },
    )
    secret_key: Optional[SecretStr] = Field(
        default=None,
        json_schema_extra={
            "prompt": "Enter your BTC China secret key",
            "is_secure": True,
            "is_connect_key": True,
        },
    )
    server: str = Field(
        default=CONSTANTS.REST_URL,
        json_schema_extra={"prompt": "Enter the BTC China API server base URL"},
    )
    timeout_ms: int = Field(
        default=CONSTANTS.DEFAULT_TIMEOUT_MS,
        json_schema_extra={"prompt": "Enter the public request timeout in milliseconds"},
    )

    @field_validator("server", mode="before")
    @classmethod
    def validate_server(cls, v: str):
        if not v:
            return CONSTANTS.REST_URL
        return v.rstrip("/")

    @field_validator("timeout_ms")
    @classmethod
    def validate_timeout_ms(cls, v: int):
        if v <= 0:
            raise ValueError("The timeout must be a positive number of milliseconds.")
        return v

