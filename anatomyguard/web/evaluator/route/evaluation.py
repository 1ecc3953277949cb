import typing as t

from fastapi import APIRouter, Depends, File, UploadFile

from anatomyguard.core import di
from anatomyguard.llm.evaluation import DocumentEncoder, EvaluationPipeline, output_schema
from anatomyguard.llm.evaluation.encoder import SUFFIX_MEDIA_TYPES
from anatomyguard.model import EvaluationReport, SourceDocument

from ..view import EvaluationRequest

router = APIRouter(prefix="/api/evaluations", tags=["evaluations"])


async def _read_upload(upload: UploadFile, fallback_name: str) -> SourceDocument:
    name = upload.filename or fallback_name
    media_type = upload.content_type
    if not media_type or media_type == "application/octet-stream":
        suffix = name[name.rfind(".") :].lower() if "." in name else ""
        media_type = SUFFIX_MEDIA_TYPES.get(suffix, media_type or "application/octet-stream")
    return SourceDocument(name=name, media_type=media_type, data=await upload.read())


@router.post("", operation_id="create_evaluation")
@di.inject
async def create_evaluation(
    request: EvaluationRequest,
    pipeline: EvaluationPipeline = Depends(di.Provide["llm.pipeline"]),
    encoder: DocumentEncoder = Depends(di.Provide["llm.encoder"]),
) -> EvaluationReport:
    # content from the caller is untrusted until it has been decoded and checked
    artifact = encoder.revalidate(request.artifact)
    feedback = encoder.revalidate(request.human_feedback)
    return await pipeline.evaluate_encoded(artifact, feedback)


@router.post("/upload", operation_id="upload_evaluation")
@di.inject
async def upload_evaluation(
    artifact: UploadFile = File(...),
    human_feedback: UploadFile = File(...),
    pipeline: EvaluationPipeline = Depends(di.Provide["llm.pipeline"]),
) -> EvaluationReport:
    return await pipeline.evaluate(
        await _read_upload(artifact, "artifact"),
        await _read_upload(human_feedback, "human_feedback"),
    )


@router.get("/schema", operation_id="get_evaluation_schema")
def get_evaluation_schema() -> dict[str, t.Any]:
    return output_schema()
