"""
Thin HTTP layer over ``requests``: base URL, bearer token injection and the
global handling of authentication failures.
"""
import logging
import os

import requests

from .exceptions import ApiError, AuthenticationRequired, NotFound, PermissionDenied

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:8000/api'
DEFAULT_TIMEOUT = 10


class TokenStore:
    """Holds the bearer token and the logged-in user's profile."""

    def __init__(self, token=None, user=None):
        self.token = token
        self.user = user

    def save(self, token, user):
        self.token = token
        self.user = user

    def clear(self):
        self.token = None
        self.user = None


class HttpClient:
    """
    Sends JSON requests to the API.

    ``on_unauthorized`` is called after the stored token has been cleared
    because the server rejected it; callers use it to send the user back to
    the login screen.
    """

    def __init__(self, base_url=None, tokens=None, on_unauthorized=None, session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = (base_url or os.environ.get('PMS_API_URL') or DEFAULT_BASE_URL).rstrip('/')
        self.tokens = tokens or TokenStore()
        self.on_unauthorized = on_unauthorized
        self.session = session or requests.Session()
        self.timeout = timeout

    def url(self, path):
        return f"{self.base_url}/{str(path).lstrip('/')}"

    def request(self, method, path, json=None, params=None):
        url = self.url(path)
        headers = {'Content-Type': 'application/json', 'Accept': 'application/json'}
        if self.tokens.token:
            headers['Authorization'] = f"Bearer {self.tokens.token}"
            logger.debug("Request with token: %s %s", method, url)
        else:
            logger.debug("Request without token: %s %s", method, url)

        response = self.session.request(method, url, json=json, params=params, headers=headers,
                                        timeout=self.timeout)
        if response.ok:
            logger.debug("Response success: %s %s", url, response.status_code)
            return response.json() if response.content else None

        payload = self._payload(response)
        logger.error("Response error: %s %s %s", url, response.status_code, payload)
        raise self._error_for(response.status_code, payload)

    def _payload(self, response):
        try:
            return response.json()
        except ValueError:
            return response.text

    def _error_for(self, status_code, payload):
        message = self._message(payload) or f"Request failed with status {status_code}"
        if status_code == 401:
            logger.info("Token expired, redirecting to login")
            self._force_login()
            return AuthenticationRequired(message, status_code, payload)
        if status_code == 403:
            if not self.tokens.token:
                logger.info("No token found, redirecting to login")
                self._force_login()
                return AuthenticationRequired(message, status_code, payload)
            logger.info("Token exists but access forbidden")
            return PermissionDenied(message, status_code, payload)
        if status_code == 404:
            return NotFound(message, status_code, payload)
        return ApiError(message, status_code, payload)

    def _message(self, payload):
        if isinstance(payload, dict):
            return payload.get('detail') or payload.get('message')
        return None

    def _force_login(self):
        self.tokens.clear()
        if self.on_unauthorized is not None:
            self.on_unauthorized()

    def get(self, path, params=None):
        return self.request('GET', path, params=params)

    def post(self, path, json=None):
        return self.request('POST', path, json=json)

    def put(self, path, json=None):
        return self.request('PUT', path, json=json)

    def patch(self, path, json=None):
        return self.request('PATCH', path, json=json)

    def delete(self, path):
        return self.request('DELETE', path)
