from fastapi import APIRouter , Depends , HTTPException , status , Request
from sqlalchemy.orm import Session
from datetime import timedelta
from typing import List
from database import get_db
from database_models import Prompt , utcnow
from auth.utils import get_current_user , get_optional_user
from prompts.schemas import (
    EnhanceRequest , EnhanceResponse , SavePromptRequest , PromptResponse , GenerateRequest ,
    GenerateResponse , AnalyzeQualityRequest , QualityResponse , BlockStructure , ExtractBlocksRequest ,
    CreateStructureRequest , UpdateBlockRequest , AddBlockRequest , RemoveBlockRequest , ReorderBlockRequest
)
from prompts.engine import enhance_prompt , DEFAULT_ROLE
from prompts.generator import generate_prompt , engine_status
from prompts.quality import analyze_prompt_quality
from prompts import blocks
from users.plans import QuotaExceededError , ensure_quota_available , consume_prompt_usage , require_enhanced_algorithm , get_history_days
from analytics.tracking import record_enhancement
from core.rate_limit import limiter
from core.config import ENHANCE_RATE_LIMIT
from core.logger import logger


router = APIRouter(prefix="/prompts" , tags=["Prompts"])


def _resolve_role(requested , user) -> str:
    if requested:
        return requested
    if user is not None and user.role:
        return user.role
    return DEFAULT_ROLE


def _save_prompt(db : Session , user , original : str , enhanced : str , role : str) -> Prompt:
    prompt = Prompt(
        user_id = user.id,
        original_prompt = original,
        enhanced_prompt = enhanced,
        role = role,
    )
    db.add(prompt)
    db.flush()
    return prompt


def _take_quota(user) -> None:
    try:
        ensure_quota_available(user)
    except QuotaExceededError:
        logger.warning(f"Daily limit reached user_id={user.id}")
        raise
    consume_prompt_usage(user)


def _get_owned_prompt(db : Session , prompt_id : int , user) -> Prompt:
    prompt = db.query(Prompt).filter(
        Prompt.id == prompt_id,
        Prompt.user_id == user.id
    ).first()

    if not prompt:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Prompt not found"
        )
    return prompt


@router.post("/enhance" , response_model=EnhanceResponse)
@limiter.limit(ENHANCE_RATE_LIMIT)
def enhance(
    request : Request,
    data : EnhanceRequest,
    db : Session = Depends(get_db),
    current_user = Depends(get_optional_user)
):
    role = _resolve_role(data.role , current_user)
    result = enhance_prompt(data.prompt , role)

    if current_user is None:
        logger.info("Anonymous prompt enhanced")
        return {**result , "saved": False , "prompt_id": None}

    _take_quota(current_user)
    prompt = _save_prompt(db , current_user , data.prompt , result["enhanced"] , role)
    record_enhancement(
        db,
        current_user.id,
        role,
        data.prompt,
        result["enhanced"],
        prompt_id=prompt.id,
        prompt_type="enhance",
    )
    db.commit()

    logger.info(f"Prompt enhanced and saved prompt_id={prompt.id} user_id={current_user.id}")
    return {**result , "saved": True , "prompt_id": prompt.id}


@router.post("/save" , status_code=status.HTTP_201_CREATED)
def save_prompt(
    data : SavePromptRequest,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    role = _resolve_role(data.role , current_user)
    prompt = _save_prompt(db , current_user , data.original_prompt , data.enhanced_prompt , role)
    db.commit()

    logger.info(f"Prompt saved prompt_id={prompt.id} user_id={current_user.id}")
    return {"message": "Prompt saved successfully" , "prompt_id": prompt.id}


@router.get("/history" , response_model=List[PromptResponse])
def prompt_history(
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = db.query(Prompt).filter(Prompt.user_id == current_user.id)

    history_days = get_history_days(current_user.plan)
    if history_days is not None:
        query = query.filter(Prompt.created_at >= utcnow() - timedelta(days=history_days))

    return query.order_by(Prompt.created_at.desc() , Prompt.id.desc()).all()


@router.post("/generate" , response_model=GenerateResponse)
@limiter.limit(ENHANCE_RATE_LIMIT)
def generate(
    request : Request,
    data : GenerateRequest,
    db : Session = Depends(get_db),
    current_user = Depends(get_optional_user)
):
    if (data.use_enhanced_algorithm or data.save) and current_user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required for saving prompts or using enhanced features",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if data.use_enhanced_algorithm:
        try:
            require_enhanced_algorithm(current_user)
        except HTTPException:
            logger.warning(f"Enhanced generation refused on free plan user_id={current_user.id}")
            raise

    role = _resolve_role(data.role , current_user)
    result = generate_prompt(
        data.topic,
        data.template_type,
        role,
        data.tone,
        data.industry,
        data.use_enhanced_algorithm,
    )

    if current_user is None:
        return {**result , "saved": False , "prompt_id": None}

    _take_quota(current_user)

    enhanced = result["enhanced_prompt"]["enhanced"]
    prompt_id = None
    if data.save:
        prompt_id = _save_prompt(db , current_user , result["prompt"] , enhanced , role).id

    record_enhancement(
        db,
        current_user.id,
        role,
        data.topic,
        enhanced,
        prompt_id=prompt_id,
        prompt_type=data.template_type or "blog",
        category=data.industry,
    )
    db.commit()

    logger.info(f"Prompt generated user_id={current_user.id} saved={data.save}")
    return {**result , "saved": prompt_id is not None , "prompt_id": prompt_id}


@router.get("/engine-status")
def get_engine_status():
    return engine_status()


@router.post("/analyze-quality" , response_model=QualityResponse)
def analyze_quality(data : AnalyzeQualityRequest):
    return analyze_prompt_quality(data.prompt)


# block builder

def _dump_blocks(structure : BlockStructure) -> list:
    return [block.model_dump() for block in structure.blocks]


@router.get("/block-templates")
def block_templates():
    return blocks.get_block_templates()


@router.post("/extract-blocks" , response_model=BlockStructure)
def extract_blocks(data : ExtractBlocksRequest):
    return blocks.structure_from_prompt(data.prompt)


@router.post("/create-structure" , response_model=BlockStructure)
def create_structure(data : CreateStructureRequest):
    if data.prompt and data.prompt.strip():
        return blocks.structure_from_prompt(data.prompt)
    return blocks.create_default_structure()


@router.post("/update-block" , response_model=BlockStructure)
def update_block(data : UpdateBlockRequest):
    return blocks.update_block(_dump_blocks(data.structure) , data.block_id , data.content)


@router.post("/add-block" , response_model=BlockStructure)
def add_block(data : AddBlockRequest):
    try:
        return blocks.add_block(_dump_blocks(data.structure) , data.block_type)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST , detail=str(e))


@router.post("/remove-block" , response_model=BlockStructure)
def remove_block(data : RemoveBlockRequest):
    return blocks.remove_block(_dump_blocks(data.structure) , data.block_id)


@router.post("/reorder-block" , response_model=BlockStructure)
def reorder_block(data : ReorderBlockRequest):
    return blocks.reorder_blocks(_dump_blocks(data.structure) , data.block_id , data.new_order)


# dynamic routes last so they do not shadow the ones above

@router.get("/{prompt_id}" , response_model=PromptResponse)
def get_prompt(
    prompt_id : int,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return _get_owned_prompt(db , prompt_id , current_user)


@router.delete("/{prompt_id}")
def delete_prompt(
    prompt_id : int,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    prompt = _get_owned_prompt(db , prompt_id , current_user)

    db.delete(prompt)
    db.commit()

    logger.warning(f"Prompt {prompt_id} deleted by user_id={current_user.id}")
    return {"message": "deleted successfully"}
