"""
Optimizely Experiment REST API client.

This module exposes one method per (resource, operation) pair for projects,
experiments, variations, audiences, dimensions and goals. Methods validate
their input synchronously and return an awaitable, so a missing identifier
raises ValidationError at call time and never reaches the network:

    async with OptimizelyClient(token) as client:
        body = await client.get_project(12345)
        project = decode_body(body)
"""

import json
from typing import Any, Awaitable, Dict, Mapping, Optional
from urllib.parse import quote

import httpx
import structlog

from ..core.exceptions import ConfigurationError
from ..core.interfaces import Requester
from ..core.models import ApiRequest, HttpMethod
from ..utils.config import DEFAULT_ADDRESS, ClientConfig
from ..utils.options import (
    OptionsLike,
    as_options,
    dimension_filter,
    is_absent,
    pick,
    require,
    require_all,
    with_defaults,
    without,
)
from .request_adapter import HttpxRequestAdapter

logger = structlog.get_logger(__name__)


def decode_body(body: Any) -> Any:
    """
    Decode a raw response body into Python data.

    Text and bytes are parsed as JSON, an empty body becomes None, and
    anything already decoded is returned as is.
    """
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    if isinstance(body, str):
        if not body.strip():
            return None
        return json.loads(body)
    return body


class OptimizelyClient:
    """Client for the Optimizely Experiment REST API (v1)."""

    def __init__(
        self,
        api_token: str,
        address: Optional[str] = None,
        use_bearer_auth: bool = False,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        requester: Optional[Requester] = None,
    ):
        """
        Initialize the client.

        Args:
            api_token: Optimizely API token (or OAuth2 access token)
            address: Base URL of the API; defaults to the public v1 endpoint
            use_bearer_auth: Send "Authorization: Bearer <token>" instead of
                the "Token" header
            timeout: Seconds passed to httpx; None means no timeout
            transport: Optional httpx transport for the default requester
            requester: Fully custom Requester; overrides timeout/transport

        Raises:
            ConfigurationError: If api_token is empty
        """
        if api_token is None or isinstance(api_token, bool) or api_token == "":
            raise ConfigurationError("Required: api_token")

        self.api_token = str(api_token)
        base_url = address or DEFAULT_ADDRESS
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.use_bearer_auth = bool(use_bearer_auth)

        if self.use_bearer_auth:
            self._base_headers = {
                "Authorization": f"Bearer {self.api_token}",
                "Content-Type": "application/json",
            }
        else:
            self._base_headers = {
                "Token": self.api_token,
                "Content-Type": "application/json",
            }

        self._requester = requester or HttpxRequestAdapter(
            timeout=timeout, transport=transport
        )

        logger.debug(
            "Optimizely client initialized",
            base_url=self.base_url,
            auth="bearer" if self.use_bearer_auth else "token",
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "OptimizelyClient":
        """Build a client from a validated ClientConfig."""
        config.validate()
        return cls(
            config.api_token,
            address=config.address,
            use_bearer_auth=config.use_bearer_auth,
            timeout=config.timeout,
            **kwargs,
        )

    @property
    def base_headers(self) -> Dict[str, str]:
        """Headers attached to every request (a copy)."""
        return dict(self._base_headers)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self._requester.aclose()

    def _send(
        self,
        method: HttpMethod,
        path: str,
        payload: Optional[Mapping[str, Any]] = None,
    ) -> Awaitable[str]:
        api_request = ApiRequest(
            method=method,
            url=self.base_url + path,
            headers=dict(self._base_headers),
            body=json.dumps(payload) if payload is not None else None,
        )
        return self._requester.request(api_request)

    # Projects

    def create_project(self, options: OptionsLike = None) -> Awaitable[str]:
        """
        Create a project.

        Args:
            options: Mapping with optional project_name (default ""),
                project_status ("Active" | "Archived", default "Active"),
                include_jquery (coerced to bool, default False),
                ip_filter (default ""), plus any other project field.
                A bare string is taken as the project_name.

        Returns:
            Awaitable resolving to the created project (raw body)
        """
        payload = with_defaults(
            as_options(options, "project_name"),
            {"project_name": "", "project_status": "Active", "ip_filter": ""},
        )
        payload["include_jquery"] = bool(payload.get("include_jquery", False))
        return self._send(HttpMethod.POST, "projects/", payload)

    def get_project(self, options: OptionsLike) -> Awaitable[str]:
        """Retrieve a project by id (bare value or {"id": ...})."""
        project_id = require(as_options(options), "id")
        return self._send(HttpMethod.GET, f"projects/{project_id}")

    def update_project(self, options: OptionsLike) -> Awaitable[str]:
        """
        Update an existing project.

        Every field except id is sent as given (project_name, project_status,
        include_jquery, project_javascript, enable_force_variation,
        exclude_disabled_experiments, exclude_names, ip_anonymization,
        ip_filter).
        """
        opts = as_options(options)
        project_id = require(opts, "id")
        return self._send(HttpMethod.PUT, f"projects/{project_id}", without(opts, "id"))

    def get_projects(self) -> Awaitable[str]:
        """List every project visible to the token."""
        return self._send(HttpMethod.GET, "projects/")

    # Experiments

    def create_experiment(self, options: OptionsLike) -> Awaitable[str]:
        """
        Create an experiment inside a project.

        Args:
            options: Mapping with required project_id and edit_url, and
                optional description, custom_css, custom_js (all default "").

        Returns:
            Awaitable resolving to the created experiment (raw body)

        Raises:
            ValidationError: If edit_url or project_id is missing
        """
        opts = as_options(options)
        require_all(opts, ["edit_url", "project_id"])
        project_id = str(opts["project_id"])
        payload = with_defaults(
            without(opts, "project_id"),
            {"description": "", "custom_css": "", "custom_js": ""},
        )
        return self._send(
            HttpMethod.POST, f"projects/{project_id}/experiments/", payload
        )

    def get_experiment(self, options: OptionsLike) -> Awaitable[str]:
        experiment_id = require(as_options(options), "id")
        return self._send(HttpMethod.GET, f"experiments/{experiment_id}")

    def update_experiment(self, options: OptionsLike) -> Awaitable[str]:
        """Update an experiment; only the supplied fields are sent."""
        opts = as_options(options)
        experiment_id = require(opts, "id")
        return self._send(
            HttpMethod.PUT, f"experiments/{experiment_id}", without(opts, "id")
        )

    def push_experiment(self, options: OptionsLike) -> Awaitable[str]:
        """Update the experiment if options carry an id, otherwise create it."""
        opts = as_options(options)
        if not is_absent(opts.get("id")):
            return self.update_experiment(opts)
        return self.create_experiment(without(opts, "id"))

    def get_experiments(self, options: OptionsLike) -> Awaitable[str]:
        """List the experiments of a project (bare id or {"project_id": ...})."""
        project_id = require(as_options(options, "project_id"), "project_id")
        return self._send(HttpMethod.GET, f"projects/{project_id}/experiments/")

    def get_experiment_by_description(
        self, options: OptionsLike, description: Optional[str] = None
    ) -> Awaitable[Optional[Dict[str, Any]]]:
        """
        Find the first experiment of a project with an exact description.

        Args:
            options: Project id, or {"project_id": ..., "description": ...}
            description: Description to match when options do not carry one

        Returns:
            Awaitable resolving to the matching experiment dict, or None

        Raises:
            ValidationError: If project_id or description is missing
        """
        opts = as_options(options, "project_id")
        if is_absent(opts.get("description")):
            opts["description"] = description
        require_all(opts, ["project_id", "description"])

        pending = self.get_experiments(opts["project_id"])
        return self._find_by_description(pending, opts["description"])

    @staticmethod
    async def _find_by_description(
        pending: Awaitable[str], description: str
    ) -> Optional[Dict[str, Any]]:
        experiments = decode_body(await pending)
        if isinstance(experiments, Mapping):
            experiments = list(experiments.values())
        elif not isinstance(experiments, list):
            return None

        for experiment in experiments:
            if isinstance(experiment, Mapping) and experiment.get("description") == description:
                return experiment
        return None

    def delete_experiment(self, options: OptionsLike) -> Awaitable[str]:
        experiment_id = require(as_options(options), "id")
        return self._send(HttpMethod.DELETE, f"experiments/{experiment_id}")

    def get_results(self, options: OptionsLike) -> Awaitable[str]:
        """
        Fetch classic (non stats engine) results of an experiment.

        Args:
            options: Experiment id, or {"id": ..., "dimension": {"id": ...,
                "value": ...}} to segment by a custom dimension

        Raises:
            ValidationError: If id is missing, or a dimension is given
                without both its id and value
        """
        return self._experiment_report(options, "results")

    def get_stats(self, options: OptionsLike) -> Awaitable[str]:
        """Fetch stats engine results; same options as get_results."""
        return self._experiment_report(options, "stats")

    def _experiment_report(self, options: OptionsLike, report: str) -> Awaitable[str]:
        opts = as_options(options)
        experiment_id = require(opts, "id")
        dimension = dimension_filter(opts.get("dimension"))

        path = f"experiments/{experiment_id}/{report}"
        if dimension is not None:
            path += "?dimension_id={}&dimension_value={}".format(
                quote(dimension.id, safe=""), quote(dimension.value, safe="")
            )
        return self._send(HttpMethod.GET, path)

    # Variations

    def create_variation(self, options: OptionsLike) -> Awaitable[str]:
        """
        Create a variation inside an experiment.

        Args:
            options: Mapping with required experiment_id and optional
                description (default ""), js_component, weight...

        Raises:
            ValidationError: If experiment_id is missing
        """
        opts = as_options(options)
        experiment_id = require(opts, "experiment_id")
        payload = with_defaults(without(opts, "experiment_id"), {"description": ""})
        return self._send(
            HttpMethod.POST, f"experiments/{experiment_id}/variations/", payload
        )

    def get_variation(self, options: OptionsLike) -> Awaitable[str]:
        variation_id = require(as_options(options), "id")
        return self._send(HttpMethod.GET, f"variations/{variation_id}")

    def update_variation(self, options: OptionsLike) -> Awaitable[str]:
        """Update a variation; only id, description and js_component are sent."""
        opts = as_options(options)
        variation_id = require(opts, "id")
        payload = {"id": opts["id"], **pick(opts, "description", "js_component")}
        return self._send(HttpMethod.PUT, f"variations/{variation_id}", payload)

    def push_variation(self, options: OptionsLike) -> Awaitable[str]:
        """Update the variation if options carry an id, otherwise create it."""
        opts = as_options(options)
        if not is_absent(opts.get("id")):
            return self.update_variation(opts)
        return self.create_variation(without(opts, "id"))

    def delete_variation(self, options: OptionsLike) -> Awaitable[str]:
        variation_id = require(as_options(options), "id")
        return self._send(HttpMethod.DELETE, f"variations/{variation_id}")

    # Audiences

    def create_audience(self, options: OptionsLike) -> Awaitable[str]:
        """
        Create an audience in a project.

        Args:
            options: Mapping with required name and id (the project id), and
                optional description (""), segmentation (False) and
                conditions ([]). Other fields are not sent.

        Raises:
            ValidationError: If name or id is missing
        """
        opts = as_options(options)
        require_all(opts, ["name", "id"])
        payload = with_defaults(
            pick(opts, "name", "id", "description", "segmentation", "conditions"),
            {"description": "", "segmentation": False, "conditions": []},
        )
        return self._send(HttpMethod.POST, f"projects/{opts['id']}/audiences/", payload)

    def get_audience(self, options: OptionsLike) -> Awaitable[str]:
        audience_id = require(as_options(options), "id")
        return self._send(HttpMethod.GET, f"audiences/{audience_id}")

    def update_audience(self, options: OptionsLike) -> Awaitable[str]:
        opts = as_options(options)
        audience_id = require(opts, "id")
        return self._send(HttpMethod.PUT, f"audiences/{audience_id}", without(opts, "id"))

    def get_audiences(self, options: OptionsLike) -> Awaitable[str]:
        """List the audiences of a project (bare id or {"id": ...})."""
        project_id = require(as_options(options), "id")
        return self._send(HttpMethod.GET, f"projects/{project_id}/audiences/")

    # Dimensions

    def create_dimension(self, options: OptionsLike) -> Awaitable[str]:
        """
        Create a custom dimension in a project.

        Args:
            options: Mapping with required name and id (the project id), and
                optional description and client_api_name (both default "").

        Raises:
            ValidationError: If name or id is missing
        """
        opts = as_options(options)
        require_all(opts, ["name", "id"])
        payload = with_defaults(
            pick(opts, "name", "id", "description", "client_api_name"),
            {"description": "", "client_api_name": ""},
        )
        return self._send(HttpMethod.POST, f"projects/{opts['id']}/dimensions/", payload)

    def get_dimension(self, options: OptionsLike) -> Awaitable[str]:
        dimension_id = require(as_options(options), "id")
        return self._send(HttpMethod.GET, f"dimensions/{dimension_id}")

    def update_dimension(self, options: OptionsLike) -> Awaitable[str]:
        opts = as_options(options)
        dimension_id = require(opts, "id")
        return self._send(HttpMethod.PUT, f"dimensions/{dimension_id}", without(opts, "id"))

    def get_dimensions(self, options: OptionsLike) -> Awaitable[str]:
        project_id = require(as_options(options), "id")
        return self._send(HttpMethod.GET, f"projects/{project_id}/dimensions/")

    # Goals

    def get_goals(self, options: OptionsLike) -> Awaitable[str]:
        """List the goals of a project (bare id or {"id": ...})."""
        project_id = require(as_options(options), "id")
        return self._send(HttpMethod.GET, f"projects/{project_id}/goals/")

