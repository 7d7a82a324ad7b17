from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from enum import Enum

class JobStatus(str, Enum):
    # Terminal statuses. Anything else the server reports is in-progress.
    FAILED = "failed"
    DONE = "done"

FINAL_STATUSES = (JobStatus.FAILED.value, JobStatus.DONE.value)

class Job(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    job_type: str = Field(frozen=True)
    base_url: str = Field(frozen=True)
    job_hash: Optional[str] = None   # assigned by the server on create
    status: Optional[str] = None     # last status reported by the server
    expired: bool = False

    def __setattr__(self, name, value):
        # The server-assigned hash is written once and never replaced or cleared.
        if name == "job_hash" and self.job_hash is not None:
            raise ValueError(f"Job hash is already set to {self.job_hash}")
        super().__setattr__(name, value)

    def is_queued(self) -> bool:
        return self.job_hash is not None

    def has_final_status(self) -> bool:
        return self.status in FINAL_STATUSES

# ---------- request payloads ----------

class CreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_type: str = Field(alias="jobType")
    uploaded_name: str = Field(alias="uploadedName")

class StatusQuery(BaseModel):
    hash: str

class ExpireRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    hash: str
    expire_in: int = Field(alias="expireIn")

class RedisQuery(BaseModel):
    hash: str
    key: str

# ---------- response bodies ----------
# Every field is optional: a valid JSON object without the key parses to None.
# Numeric values in string fields are read as their text, e.g. {"status": 5} -> "5".

class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    uploaded_name: Optional[str] = Field(default=None, alias="uploadedName")
    image_url: Optional[str] = Field(default=None, alias="imageURL")

class CreateResponse(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    hash: Optional[str] = None

class StatusResponse(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    status: Optional[str] = None

class ExpireResponse(BaseModel):
    value: Optional[int] = None

class ValueResponse(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    value: Optional[str] = None

class JobTypesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_types: List[str] = Field(default_factory=list, alias="jobTypes")
