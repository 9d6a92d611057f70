from fastapi import APIRouter , Depends , HTTPException , status , Query
from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional
from database import get_db
from database_models import PromptTemplate , UsageEvent , utcnow
from auth.utils import get_current_user
from prompt_templates.schemas import (
    TemplateCreate , TemplateVersionCreate , TemplateResponse , ApplyTemplateRequest , ApplyTemplateResponse ,
    CompareTemplatesRequest , CompareTemplatesResponse , ValidateTemplateRequest , ValidateTemplateResponse
)
from prompt_templates import manager
from prompts.engine import DEFAULT_ROLE
from analytics.tracking import record_enhancement
from core.logger import logger


router = APIRouter(prefix="/templates" , tags=["Templates"])


def _visible_templates(db : Session , user) -> List[dict]:
    rows = db.query(PromptTemplate).filter(
        or_(PromptTemplate.user_id == user.id , PromptTemplate.is_public == True)
    ).order_by(PromptTemplate.id).all()
    return [manager.template_to_dict(row) for row in rows]


def _get_visible_template(db : Session , template_id : int , user) -> PromptTemplate:
    template = db.query(PromptTemplate).filter(PromptTemplate.id == template_id).first()

    if not template or (template.user_id != user.id and not template.is_public):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found"
        )
    return template


def _ensure_owner(template : PromptTemplate , user , action : str) -> None:
    if template.user_id != user.id:
        logger.warning(f"Template {action} refused template_id={template.id} user_id={user.id}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not allowed to {action} this template"
        )


@router.post("" , response_model=TemplateResponse , status_code=status.HTTP_201_CREATED)
def create_template(
    data : TemplateCreate,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    fields = manager.create_template(
        name = data.name,
        content = data.content,
        user_id = current_user.id,
        role = data.role or current_user.role or DEFAULT_ROLE,
        description = data.description,
        category = data.category,
        tags = data.tags,
        is_public = data.is_public,
    )

    template = PromptTemplate(**fields)
    db.add(template)
    db.commit()
    db.refresh(template)

    logger.info(f"Template created template_id={template.id} user_id={current_user.id}")
    return template


@router.get("")
def list_templates(
    category : Optional[str] = None,
    search : Optional[str] = None,
    grouped : bool = False,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    templates = _visible_templates(db , current_user)

    if category:
        templates = [t for t in templates if t["category"] == category]

    if search:
        templates = manager.search_templates(templates , search)

    if grouped:
        return {"templates": manager.group_templates_by_category(templates) , "grouped": True}

    return {"templates": templates , "grouped": False}


@router.get("/popular" , response_model=List[TemplateResponse])
def popular_templates(
    limit : int = Query(manager.DEFAULT_LIST_LIMIT , ge=1 , le=50),
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return manager.get_popular_templates(_visible_templates(db , current_user) , limit)


@router.get("/recent" , response_model=List[TemplateResponse])
def recent_templates(
    limit : int = Query(manager.DEFAULT_LIST_LIMIT , ge=1 , le=50),
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return manager.get_recent_templates(_visible_templates(db , current_user) , limit)


@router.get("/recommended" , response_model=List[TemplateResponse])
def recommended_templates(
    role : Optional[str] = None,
    limit : int = Query(manager.DEFAULT_LIST_LIMIT , ge=1 , le=50),
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    used_ids = [
        row[0] for row in db.query(UsageEvent.template_id).filter(
            UsageEvent.user_id == current_user.id,
            UsageEvent.template_id.isnot(None)
        ).distinct().all()
    ]

    return manager.get_recommended_templates(
        _visible_templates(db , current_user),
        role or current_user.role or DEFAULT_ROLE,
        used_ids,
        limit,
    )


@router.post("/compare" , response_model=CompareTemplatesResponse)
def compare_templates(
    data : CompareTemplatesRequest,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    first = _get_visible_template(db , data.template_id_1 , current_user)
    second = _get_visible_template(db , data.template_id_2 , current_user)

    return manager.compare_template_versions(
        manager.template_to_dict(first),
        manager.template_to_dict(second),
    )


@router.post("/validate" , response_model=ValidateTemplateResponse)
def validate_template(
    data : ValidateTemplateRequest,
    current_user = Depends(get_current_user)
):
    variables = None
    if data.variables is not None:
        variables = [variable.model_dump() for variable in data.variables]
    return manager.validate_template(data.content , variables)


@router.get("/{template_id}" , response_model=TemplateResponse)
def get_template(
    template_id : int,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return _get_visible_template(db , template_id , current_user)


@router.delete("/{template_id}")
def delete_template(
    template_id : int,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    template = _get_visible_template(db , template_id , current_user)
    _ensure_owner(template , current_user , "delete")

    # keep later versions pointing at something that exists
    db.query(PromptTemplate).filter(
        PromptTemplate.previous_version_id == template.id
    ).update({PromptTemplate.previous_version_id: template.previous_version_id})

    db.delete(template)
    db.commit()

    logger.warning(f"Template {template_id} deleted by user_id={current_user.id}")
    return {"message": "deleted successfully"}


@router.post("/{template_id}/apply" , response_model=ApplyTemplateResponse)
def apply_template(
    template_id : int,
    data : ApplyTemplateRequest,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    template = _get_visible_template(db , template_id , current_user)
    result = manager.apply_template(manager.template_to_dict(template) , data.values)

    template.usage_count = (template.usage_count or 0) + 1
    record_enhancement(
        db,
        current_user.id,
        current_user.role or template.role,
        template.content,
        result["prompt"],
        template_id=template.id,
        prompt_type="template",
        category=template.category or None,
        tags=list(template.tags or []),
    )
    db.commit()

    if result["missing_variables"]:
        logger.warning(f"Template applied with missing variables template_id={template.id}")

    logger.info(f"Template applied template_id={template.id} user_id={current_user.id}")
    return {**result , "template_id": template.id}


@router.post("/{template_id}/version" , response_model=TemplateResponse , status_code=status.HTTP_201_CREATED)
def create_template_version(
    template_id : int,
    data : TemplateVersionCreate,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    existing = _get_visible_template(db , template_id , current_user)
    _ensure_owner(existing , current_user , "version")

    fields = manager.create_template_version(
        manager.template_to_dict(existing),
        data.model_dump(exclude_unset=True),
    )
    fields["created_at"] = fields["created_at"] or utcnow()

    template = PromptTemplate(**fields)
    db.add(template)
    db.commit()
    db.refresh(template)

    logger.info(f"Template version {template.version} created template_id={template.id}")
    return template


@router.get("/{template_id}/versions" , response_model=List[TemplateResponse])
def template_versions(
    template_id : int,
    db : Session = Depends(get_db),
    current_user = Depends(get_current_user)
):
    start = _get_visible_template(db , template_id , current_user)

    related = db.query(PromptTemplate).filter(PromptTemplate.user_id == start.user_id).all()
    chain = manager.version_chain(
        manager.template_to_dict(start),
        [manager.template_to_dict(row) for row in related],
    )

    if start.user_id != current_user.id:
        chain = [t for t in chain if t["is_public"]]
    return chain
