# lms_media/schemas/uploads_multipart.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List


# Request-modellen zijn bewust ruim: preconditions checkt de orchestrator (400),
# niet pydantic (422).
class _In(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _Out(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class MultipartInitiateIn(_In):
    key: Any = None
    filename: Any = None  # oude clients sturen 'filename'
    content_type: Any = Field(default=None, alias="contentType")

    @property
    def target_key(self) -> Any:
        return self.key if self.key is not None else self.filename


class MultipartInitiateOut(_Out):
    upload_id: str = Field(alias="uploadId")
    bucket: str
    key: str


class MultipartSignPartIn(_In):
    key: Any = None
    upload_id: Any = Field(default=None, alias="uploadId")
    part_number: Any = Field(default=None, alias="partNumber")


class MultipartSignPartOut(_Out):
    url: str
    part_number: int = Field(alias="partNumber")
    expires_in: int = Field(alias="expiresIn")


class MultipartSignPartsIn(_In):
    key: Any = None
    upload_id: Any = Field(default=None, alias="uploadId")
    part_numbers: Any = Field(default=None, alias="partNumbers")


class MultipartSignPartsOut(_Out):
    parts: List[MultipartSignPartOut]


class MultipartCompleteIn(_In):
    key: Any = None
    upload_id: Any = Field(default=None, alias="uploadId")
    parts: Any = None  # [{partNumber, eTag}]


class MultipartCompleteOut(_Out):
    location: str
    bucket: str
    key: str


class MultipartAbortIn(_In):
    key: Any = None
    upload_id: Any = Field(default=None, alias="uploadId")


class MultipartAbortOut(_Out):
    aborted: bool
    outcome: str
