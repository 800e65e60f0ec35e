"""
Purpose:
- /api/v1/caption: image + preferences -> base caption + composed caption + meta.
- /api/v1/caption/compose: run the rule-based composer on plain text (no models).

Notes:
- Form fields keep the browser client's camelCase names.
- Model failures are invisible here except through meta.source.
"""

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from PIL import Image, UnidentifiedImageError
from io import BytesIO
import logging

from ..services.composer import CaptionOptions, rule_based_caption
from ..services.options import build_options
from ..services.pipeline import CaptionPipeline
from ..services.quality import looks_bad
from .schema import CaptionResponse, ComposeIn, ComposeOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["caption"])

def get_pipeline(request: Request) -> CaptionPipeline:
    return request.app.state.pipeline

def _decode_image(raw: bytes) -> Image.Image:
    try:
        img = Image.open(BytesIO(raw))
        img.load()
        return img
    except (UnidentifiedImageError, OSError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid image: {e}")

@router.post("/caption", response_model=CaptionResponse)
async def caption(
    file: UploadFile | None = File(default=None),
    tone: str | None = Form(default=None),
    keywords: str | None = Form(default=None),
    hashtags: str | None = Form(default=None),
    includeHashtags: str | None = Form(default=None),
    includeMentions: str | None = Form(default=None),
    includeEmojis: str | None = Form(default=None),
    includeLocation: str | None = Form(default=None),
    location: str | None = Form(default=None),
    handles: str | None = Form(default=None),
    voice: str | None = Form(default=None),
    length: str | None = Form(default=None),
    emojiCount: str | None = Form(default=None),
    emojiPlacement: str | None = Form(default=None),
    hashtagsPlacement: str | None = Form(default=None),
    mentionsPlacement: str | None = Form(default=None),
    pipeline: CaptionPipeline = Depends(get_pipeline),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No image uploaded (field 'file').")

    raw = await file.read()
    if not raw:
        raise HTTPException(status_code=400, detail="No image uploaded (field 'file').")
    max_bytes = int(pipeline.settings.max_upload_mb * 1024 * 1024)
    if len(raw) > max_bytes:
        raise HTTPException(status_code=400, detail=f"Image too large (max {pipeline.settings.max_upload_mb:g}MB)")
    img = _decode_image(raw)

    opts, emoji_count = build_options({
        "tone": tone,
        "keywords": keywords,
        "hashtags": hashtags,
        "includeHashtags": includeHashtags,
        "includeMentions": includeMentions,
        "includeEmojis": includeEmojis,
        "includeLocation": includeLocation,
        "location": location,
        "handles": handles,
        "voice": voice,
        "length": length,
        "emojiCount": emojiCount,
        "emojiPlacement": emojiPlacement,
        "hashtagsPlacement": hashtagsPlacement,
        "mentionsPlacement": mentionsPlacement,
    })
    logger.info(
        "caption request file=%s tone=%s voice=%s length=%s hashtags=%s handles=%s location=%r emojis=%s/%d placements=%s",
        file.filename, opts.tone, opts.voice.value, opts.length.value, list(opts.hashtags),
        list(opts.handles), opts.location, opts.include_emojis, emoji_count, opts.placements(),
    )

    try:
        result = await pipeline.run(img, opts, emoji_count=emoji_count)
    except Exception as e:
        logger.exception("caption pipeline failed for %s", file.filename)
        raise HTTPException(status_code=500, detail=f"caption-failed: {e!r}")
    return result.to_dict()

@router.post("/caption/compose", response_model=ComposeOut)
def compose(payload: ComposeIn):
    """
    Quick diagnostic endpoint to see how the composer (and quality gate) treat a piece of text.
    """
    o = payload.options
    opts = CaptionOptions(
        tone=o.tone,
        keywords=o.keywords,
        hashtags=o.hashtags,
        include_hashtags=o.includeHashtags,
        include_mentions=o.includeMentions,
        include_emojis=o.includeEmojis,
        include_location=o.includeLocation,
        location=(o.location or "").strip() or None,
        handles=o.handles,
        voice=o.voice,
        length=o.length,
        emojis=o.emojis,
        emoji_placement=o.emojiPlacement,
        hashtags_placement=o.hashtagsPlacement,
        mentions_placement=o.mentionsPlacement,
    )
    verdict = looks_bad(payload.text, payload.prompt) if payload.prompt is not None else None
    return {
        "enhanced": rule_based_caption(payload.text, opts),
        "looks_bad": verdict,
        "placements": opts.placements(),
    }
