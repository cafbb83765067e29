"""
SensorPush API client for accessing gateways, sensors and samples.
Implements the SensorPush cloud API v1 (OAuth token flow, JSON over POST).
"""

import json
import logging
import requests
from datetime import date
from typing import Any, Optional, List, Dict

from .models import Sensor, Gateway, Sample
from .parsing import parse_device_response
from .config import SensorPushConfig, DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

BASE_URL = DEFAULT_BASE_URL

BASE_HEADERS = {
    'Accept': 'application/json',
    'Content-Type': 'application/json'
}


class SensorPushError(Exception):
    """Base exception for SensorPush client errors."""
    pass


class AuthenticationError(SensorPushError):
    """Raised when credentials are missing or rejected."""
    pass


class ParseError(SensorPushError):
    """Raised when an API response cannot be parsed."""
    pass


class APIError(SensorPushError):
    """
    Raised when the HTTP request itself fails.

    Attributes:
        status_code: HTTP status, if a response was received
        api_message: Message returned by the API, if any
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        api_message: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.api_message = api_message


class SensorPushClient:
    """
    Client for the SensorPush API.
    Handles authentication, device listing and sample retrieval.

    Example:
        client = SensorPushClient(username='user@example.com', password='secret')
        client.authenticate()
        for sensor in client.sensors():
            print(sensor.name, sensor.battery_percentage)

        # Or with an existing token
        client = SensorPushClient(accesstoken='your-token')
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        accesstoken: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        base_url: str = BASE_URL
    ):
        """
        Initialize SensorPush client.

        Args:
            username: SensorPush account email
            password: SensorPush account password
            accesstoken: Optional pre-existing access token
            timeout: Request timeout in seconds (connect and read each)
            base_url: Base URL for API endpoints
        """
        self.username = username
        self.password = password
        self.accesstoken = accesstoken
        self.timeout = timeout
        self.base_url = base_url

        self.session = requests.Session()

    @classmethod
    def from_config(cls, config: SensorPushConfig) -> 'SensorPushClient':
        """
        Create API client from configuration.

        Args:
            config: SensorPushConfig object

        Returns:
            Configured SensorPushClient instance
        """
        return cls(
            username=config.api.username,
            password=config.api.password,
            accesstoken=config.api.accesstoken,
            timeout=config.api.timeout,
            base_url=config.api.base_url
        )

    @property
    def authenticated(self) -> bool:
        """Whether an access token is currently set."""
        return self.accesstoken is not None

    def _headers(self) -> Dict[str, str]:
        """Request headers, with Authorization when a token is set."""
        headers = dict(BASE_HEADERS)
        if self.accesstoken is not None:
            headers['Authorization'] = self.accesstoken
        return headers

    def _post(self, endpoint: str, body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Make a POST request to the API.

        The HTTP status is not checked: error envelopes that parse as
        JSON are returned like any other body.

        Args:
            endpoint: API endpoint path (e.g. '/devices/sensors')
            body: JSON request body

        Returns:
            Parsed JSON response

        Raises:
            ParseError: If the response is not a JSON object
            APIError: If the HTTP request fails
        """
        if body is None:
            body = {}

        url = self.base_url + endpoint
        logger.debug("POST %s", endpoint)

        try:
            response = self.session.post(
                url,
                data=json.dumps(body),
                headers=self._headers(),
                timeout=(self.timeout, self.timeout)
            )
        except requests.Timeout as e:
            raise APIError(f"Request timed out: {e}") from e
        except requests.RequestException as e:
            status_code = getattr(e.response, 'status_code', None)
            raise APIError(f"HTTP request failed: {e}", status_code=status_code) from e

        logger.debug("POST %s returned %s", endpoint, response.status_code)

        try:
            data = json.loads(response.text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Failed to parse API response: {e}") from e

        if not isinstance(data, dict):
            raise ParseError(
                f"Unexpected API response structure: expected object, got {type(data).__name__}"
            )

        return data

    def authenticate(self) -> bool:
        """
        Authenticate with the SensorPush API.

        Sends the credentials for an authorization code, then exchanges
        the code for an access token. Calling it again replaces the token.

        Returns:
            True if an access token was obtained

        Raises:
            AuthenticationError: If username or password is missing
            ParseError: If a response cannot be parsed
            APIError: If an HTTP request fails
        """
        if self.username is None or self.password is None:
            raise AuthenticationError("Username and password required")

        authorization = self._authorize()
        # A rejected login drops any previous token.
        self.accesstoken = self._get_token(authorization) if authorization else None

        if self.accesstoken is None:
            logger.warning("SensorPush authentication did not return an access token")
            return False

        logger.info("Authenticated with SensorPush API")
        return True

    def _authorize(self) -> Optional[str]:
        """Exchange email and password for an authorization code."""
        response = self._post(
            '/oauth/authorize',
            {'email': self.username, 'password': self.password}
        )
        return response.get('authorization')

    def _get_token(self, authorization: str) -> Optional[str]:
        """Exchange an authorization code for an access token."""
        response = self._post('/oauth/accesstoken', {'authorization': authorization})
        return response.get('accesstoken')

    def gateways(self) -> List[Gateway]:
        """
        List all gateways on the account.

        Returns:
            List of Gateway objects

        Raises:
            ParseError: If the response cannot be parsed
            APIError: If the HTTP request fails
        """
        response = self._post('/devices/gateways')
        return parse_device_response(response, Gateway)

    def sensors(self) -> List[Sensor]:
        """
        List all sensors on the account.

        Returns:
            List of Sensor objects

        Raises:
            ParseError: If the response cannot be parsed
            APIError: If the HTTP request fails
        """
        response = self._post('/devices/sensors')
        return parse_device_response(response, Sensor)

    def samples(
        self,
        sensor_id: str,
        limit: Optional[int] = None,
        start_time: Optional[date | str] = None,
        end_time: Optional[date | str] = None
    ) -> List[Sample]:
        """
        Retrieve samples for a sensor.

        Args:
            sensor_id: Sensor identifier
            limit: Maximum number of samples to return
            start_time: Earliest sample time
            end_time: Latest sample time

        Returns:
            List of Sample objects (empty if the sensor is not in the response)

        Raises:
            ParseError: If the response cannot be parsed
            APIError: If the HTTP request fails
        """
        body: Dict[str, Any] = {'sensors': [sensor_id]}
        if limit is not None:
            body['limit'] = limit
        if start_time is not None:
            body['startTime'] = self._format_time(start_time)
        if end_time is not None:
            body['endTime'] = self._format_time(end_time)

        response = self._post('/samples', body)

        sensors = response.get('sensors')
        if not isinstance(sensors, dict):
            return []

        entries = sensors.get(sensor_id)
        if not isinstance(entries, list):
            return []

        return [Sample.from_api(attrs) for attrs in entries if isinstance(attrs, dict)]

    @staticmethod
    def _format_time(value: date | str) -> str:
        """Serialize a time filter for the request body."""
        if isinstance(value, date):
            return value.isoformat()
        return str(value)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def __enter__(self):
        """
        Context manager entry. Authenticates when no token is set.

        The session is closed if authentication fails.
        """
        if self.authenticated:
            return self

        try:
            if not self.authenticate():
                raise AuthenticationError("Authentication failed")
        except SensorPushError:
            self.close()
            raise

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False
