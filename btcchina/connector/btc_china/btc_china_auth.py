import base64
import hashlib
import hmac
from typing import Any, Dict, Optional, Sequence

import ujson

from btcchina.connector.btc_china import btc_china_constants as CONSTANTS
from btcchina.connector.btc_china.btc_china_utils import param_to_str, validate_scalar_params
from btcchina.core.utils.tracking_nonce import NonceCreator, _nonce_provider
from btcchina.core.web_assistant.auth import AuthBase
from btcchina.core.web_assistant.connections.data_types import RESTRequest
from btcchina.exceptions import BTCChinaValidationError


class BTCChinaAuth(AuthBase):
    """
    Auth class required by BTC China trade API
    Every private call is a JSON-RPC request signed with HMAC-SHA1 over a canonical message made of the tonce,
    the access key, the request method, the rpc id, the method name and the comma joined params.
    """

    def __init__(self, api_key: Optional[str], secret_key: Optional[str], nonce_creator: Optional[NonceCreator] = None):
        self.api_key = api_key
        self.secret_key = secret_key
        self._nonce_creator = nonce_creator or _nonce_provider

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key) and bool(self.secret_key)

    def get_tonce(self) -> int:
        return self._nonce_creator.get_tracking_nonce()

    async def rest_authenticate(self, request: RESTRequest) -> RESTRequest:
        """
        Adds the Basic authorization and the tonce headers to a JSON-RPC request.
        A tonce already present in the request headers is reused, so the caller can know it beforehand.

        :param request: the request to be configured for authenticated interaction

        :return: The RESTRequest with auth information included
        """
        payload = ujson.loads(request.data)

        headers = {}
        if request.headers is not None:
            headers.update(request.headers)
        tonce = headers.get(CONSTANTS.TONCE_HEADER)
        headers.update(self.authentication_headers(
            method=payload["method"],
            params=payload["params"],
            tonce=int(tonce) if tonce is not None else None))
        request.headers = headers

        return request

    def authentication_headers(self, method: str, params: Sequence[Any], tonce: Optional[int] = None) -> Dict[str, str]:
        if tonce is None:
            tonce = self.get_tonce()

        header = {
            CONSTANTS.AUTHORIZATION_HEADER: f"Basic {self.generate_signature(method, params, tonce)}",
            CONSTANTS.TONCE_HEADER: str(tonce),
        }

        return header

    def generate_signature(self, method: str, params: Sequence[Any], tonce: int) -> str:
        """
        Signs a private call. Identical inputs always produce the identical signature.

        :param method: the JSON-RPC method name, e.g. getAccountInfo
        :param params: the positional parameters of the call
        :param tonce: the tonce sent along with the request

        :return: base64 of `api_key:hex_hmac_sha1`, ready to be used as Basic credential
        """
        if not self.has_credentials:
            raise BTCChinaValidationError("An API key and secret must be provided to make private API requests.")
        if not method:
            raise BTCChinaValidationError("The private API method name must not be empty.")
        if not isinstance(params, (list, tuple)):
            raise BTCChinaValidationError(
                f"The params {params!r} must be a list. If there are no params pass an empty list [].")
        validate_scalar_params(params)

        message = self.canonical_message(method=method, params=params, tonce=tonce)
        digest = hmac.new(self.secret_key.encode("utf8"), message.encode("utf8"), hashlib.sha1).hexdigest()
        signature = base64.b64encode(f"{self.api_key}:{digest}".encode("utf8")).decode("utf8")

        return signature

    def canonical_message(self, method: str, params: Sequence[Any], tonce: int) -> str:
        # the field order is checked by the server
        return "&".join([
            f"tonce={tonce}",
            f"accesskey={self.api_key}",
            f"requestmethod={CONSTANTS.REQUEST_METHOD_TOKEN}",
            f"id={CONSTANTS.JSON_RPC_ID}",
            f"method={method}",
            f"params={','.join(param_to_str(param) for param in params)}",
        ])
