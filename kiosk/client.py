import logging
import time
from pathlib import Path
from typing import List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from kiosk import config
from kiosk.errors import MalformedResponseError, PollTimeoutError, TransportError
from kiosk.job_schema import (
    CreateRequest,
    CreateResponse,
    ExpireRequest,
    ExpireResponse,
    Job,
    JobTypesResponse,
    RedisQuery,
    StatusQuery,
    StatusResponse,
    UploadResponse,
    ValueResponse,
)

logger = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}

class JobClient:
    """Drives kiosk jobs through upload -> queue -> poll -> resolve.

    The client holds no job state; every operation takes the ``Job`` it acts
    on and updates it in place. Pass ``http_client`` to reuse a session (or a
    test client); otherwise one is created with the configured timeouts and
    closed by ``close()``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.base_url = (base_url or config.BASE_URL).rstrip("/")
        connect = config.CONNECT_TIMEOUT if connect_timeout is None else connect_timeout
        read = config.READ_TIMEOUT if read_timeout is None else read_timeout
        self.timeout = httpx.Timeout(connect=connect, read=read, write=read, pool=connect)
        self._owns_client = http_client is None
        self._http = httpx.Client(timeout=self.timeout) if http_client is None else http_client

    def __enter__(self) -> "JobClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    # ------------------------------------------------------------------
    # Job lifecycle
    # ------------------------------------------------------------------

    def new_job(self, job_type: str) -> Job:
        return Job(job_type=job_type, base_url=self.base_url)

    def create(self, job: Job, local_file_path) -> Job:
        """
        1. Uploads the local file to the kiosk.
        2. Queues a job of ``job.job_type`` for the uploaded file.
        3. Stores the server-assigned hash on the job, if one came back.
        """
        if job.is_queued():
            raise ValueError(f"Job {job.job_hash} is already queued")

        uploaded_name = self.upload(local_file_path)

        payload = CreateRequest(job_type=job.job_type, uploaded_name=uploaded_name)
        created = self._post_json(config.PREDICT_PATH, payload, CreateResponse)
        if created.hash is None:
            logger.warning("Create response for %s had no hash; job stays unqueued", uploaded_name)
            return job

        job.job_hash = created.hash
        logger.info("Queued %s job %s for %s", job.job_type, job.job_hash, uploaded_name)
        return job

    def upload(self, local_file_path) -> str:
        """Uploads a file and returns the name the server stored it under."""
        path = Path(local_file_path)
        try:
            fh = path.open("rb")
        except OSError as e:
            raise TransportError(f"Cannot read {path}: {e}") from e

        with fh:
            response = self._send("POST", config.UPLOAD_PATH, files={"file": (path.name, fh)})
        uploaded = self._parse(response, UploadResponse)

        if uploaded.uploaded_name is None:
            raise TransportError(
                f"Upload of {path.name} returned no uploadedName",
                status_code=response.status_code,
                url=str(response.url),
            )
        logger.debug("Uploaded %s as %s", path, uploaded.uploaded_name)
        return uploaded.uploaded_name

    def update_status(self, job: Job) -> Optional[str]:
        self._require_hash(job)
        result = self._post_json(config.STATUS_PATH, StatusQuery(hash=job.job_hash), StatusResponse)
        if result.status != job.status:
            logger.info("Job %s status: %s -> %s", job.job_hash, job.status, result.status)
        job.status = result.status
        return job.status

    def wait_for_final_status(
        self,
        job: Job,
        poll_interval: float = config.POLL_INTERVAL,
        max_attempts: Optional[int] = None,
    ) -> str:
        """Polls until the job reports ``failed`` or ``done`` and returns it.

        There is no deadline unless ``max_attempts`` is given. Errors from a
        poll propagate immediately.
        """
        if poll_interval < 0:
            raise ValueError("poll_interval must be non-negative")
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._require_hash(job)

        attempts = 0
        while True:
            self.update_status(job)
            attempts += 1
            if job.has_final_status():
                return job.status
            if max_attempts is not None and attempts >= max_attempts:
                raise PollTimeoutError(attempts, job.status)
            if poll_interval:
                time.sleep(poll_interval)

    def expire(self, job: Job, ttl_seconds: int) -> Job:
        """Sets a time-to-live on the job's server-side record."""
        self._require_hash(job)
        payload = ExpireRequest(hash=job.job_hash, expire_in=ttl_seconds)
        result = self._post_json(config.EXPIRE_PATH, payload, ExpireResponse)

        # The server answers 0 when it does not know the hash.
        if not result.value:
            raise TransportError(f"Could not expire job {job.job_hash}: hash not found")

        job.expired = True
        logger.info("Job %s expires in %ss", job.job_hash, ttl_seconds)
        return job

    def get_output_path(self, job: Job) -> Optional[str]:
        return self._get_redis_value(job, config.OUTPUT_KEY)

    def get_error_reason(self, job: Job) -> Optional[str]:
        return self._get_redis_value(job, config.ERROR_KEY)

    def get_job_types(self) -> List[str]:
        response = self._send("GET", config.JOBTYPES_PATH, headers={"Accept": "application/json"})
        return self._parse(response, JobTypesResponse).job_types

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _get_redis_value(self, job: Job, key: str) -> Optional[str]:
        self._require_hash(job)
        result = self._post_json(config.REDIS_PATH, RedisQuery(hash=job.job_hash, key=key), ValueResponse)
        if result.value is None:
            logger.warning("No %s stored for job %s", key, job.job_hash)
        return result.value

    def _require_hash(self, job: Job) -> None:
        if not job.is_queued():
            raise ValueError("Job has no hash; call create() first")

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _post_json(self, path: str, payload: BaseModel, model: Type[ResponseModel]) -> ResponseModel:
        body = payload.model_dump_json(by_alias=True)
        response = self._send("POST", path, content=body, headers=JSON_HEADERS)
        return self._parse(response, model)

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        url = self._url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}", url=url) from e

        if response.status_code != httpx.codes.OK:
            raise TransportError(
                f"{method} {url} returned HTTP {response.status_code}",
                status_code=response.status_code,
                url=url,
            )
        return response

    def _parse(self, response: httpx.Response, model: Type[ResponseModel]) -> ResponseModel:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Unexpected response from {response.url}: {e.errors()[0]['msg']}",
                body=response.text,
            ) from e
