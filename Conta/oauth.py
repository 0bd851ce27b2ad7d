# Conta/oauth.py
import os
from functools import lru_cache
from typing import Any, Dict

import requests
from dotenv import load_dotenv
from jose import JWTError, jwt

from Conta.users import IdentityAssertion
from errors import Unauthenticated

load_dotenv()

TOKEN_URL = os.getenv("OAUTH_TOKEN_URL")
JWKS_URL = os.getenv("OAUTH_JWKS_URL")
ISSUER = os.getenv("OAUTH_ISSUER")
CLIENT_ID = os.getenv("OAUTH_CLIENT_ID")
CLIENT_SECRET = os.getenv("OAUTH_CLIENT_SECRET")
REDIRECT_URI = os.getenv("OAUTH_REDIRECT_URI")


@lru_cache(maxsize=1)
def _jwks() -> Dict[str, Any]:
    r = requests.get(JWKS_URL, timeout=10)
    r.raise_for_status()
    return r.json()


def _rsa_key_for(token: str) -> Dict[str, str]:
    try:
        kid = jwt.get_unverified_header(token).get("kid")
    except JWTError:
        raise Unauthenticated("Token de identidade inválido")
    for refresh in (False, True):
        if refresh:
            # unknown kid: the provider may have rotated its keys
            _jwks.cache_clear()
        for key in _jwks().get("keys", []):
            if key.get("kid") == kid:
                return {"kty": key["kty"], "kid": key["kid"], "n": key["n"], "e": key["e"]}
    raise Unauthenticated("Nenhuma chave corresponde ao token")


def exchange_code(code: str, redirect_uri: str | None = None) -> Dict[str, Any]:
    """Trade the authorization code for the provider's token response."""
    try:
        r = requests.post(
            TOKEN_URL,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "client_id": CLIENT_ID,
                "client_secret": CLIENT_SECRET,
                "redirect_uri": redirect_uri or REDIRECT_URI,
            },
            timeout=10,
        )
        r.raise_for_status()
    except requests.RequestException as e:
        raise Unauthenticated(f"Falha ao trocar o código de autorização: {e}")
    return r.json()


def verify_id_token(token: str) -> Dict[str, Any]:
    rsa_key = _rsa_key_for(token)
    try:
        claims = jwt.decode(
            token,
            rsa_key,
            algorithms=["RS256"],
            audience=CLIENT_ID,
            issuer=ISSUER,
            options={"verify_at_hash": False},
        )
    except JWTError as e:
        raise Unauthenticated(f"Token de identidade inválido: {e}")
    if not claims.get("sub"):
        raise Unauthenticated("Token de identidade sem 'sub'")
    return claims


def assertion_from_claims(claims: Dict[str, Any]) -> IdentityAssertion:
    return IdentityAssertion(
        open_id=claims["sub"],
        name=claims.get("name"),
        email=claims.get("email"),
        login_method=claims.get("login_method") or claims.get("idp") or "oauth",
    )


def identify(code: str) -> IdentityAssertion:
    tokens = exchange_code(code)
    id_token = tokens.get("id_token")
    if not id_token:
        raise Unauthenticated("Resposta do provedor sem id_token")
    return assertion_from_claims(verify_id_token(id_token))
