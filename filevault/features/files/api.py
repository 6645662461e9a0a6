from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import PlainTextResponse, Response

from filevault.features.files.service import FilesService

router = APIRouter(tags=["files"])


def _service(request: Request) -> FilesService:
    return FilesService(index=request.app.state.index)


@router.post("/upload")
async def upload_file(
    request: Request,
    file: UploadFile | None = File(default=None),
    identifier: str = Form(default=""),
) -> dict[str, object]:
    return await _service(request).upload(identifier=identifier, file=file)


@router.get("/files")
async def list_files(request: Request) -> list[dict[str, object]]:
    return await _service(request).list_files()


@router.get("/files/{identifier}")
async def download_file(request: Request, identifier: str, version: str = "1") -> Response:
    return await _service(request).download(identifier=identifier, version=version)


@router.delete("/files/{identifier}")
async def delete_file(request: Request, identifier: str, version: str = "") -> dict[str, object]:
    return await _service(request).delete(identifier=identifier, version=version)


@router.get("/files/{identifier}/diff/{version}", response_class=PlainTextResponse)
async def diff_file(request: Request, identifier: str, version: str) -> PlainTextResponse:
    return await _service(request).diff(identifier=identifier, version=version)


@router.get("/hash/{digest}")
async def get_by_hash(request: Request, digest: str) -> dict[str, object]:
    return await _service(request).by_hash(digest=digest)
