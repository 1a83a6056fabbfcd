"""Safety checklists: category and checklist management, performing checklists, history."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.orm import Session

from ..core.permissions import TAB_SAFETY
from ..core.security import require_tab
from ..models.base import get_db
from ..models.safety import SubmissionStatus
from ..services import checklists as checklist_service

router = APIRouter(prefix="/checklists", tags=["safety"], dependencies=[Depends(require_tab(TAB_SAFETY))])


# ── Schemas ──────────────────────────────────────────────────────────────────

class CategoryIn(BaseModel):
    name: str


class ChecklistItem(BaseModel):
    id: Optional[str] = None
    text: str


class ChecklistCreate(BaseModel):
    category_id: str
    title: str
    items: List[ChecklistItem]


class ChecklistUpdate(BaseModel):
    title: str
    items: List[ChecklistItem]


class ChecklistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    category_id: str
    title: str
    items: List[ChecklistItem]


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    checklists: List[ChecklistResponse] = []


class CategoryDeleted(BaseModel):
    checklists_removed: int


class SubmissionItemIn(BaseModel):
    item_id: str
    status: str = SubmissionStatus.NA
    comment: str = ""


class SubmissionCreate(BaseModel):
    checklist_id: str
    location: str = ""
    performed_by: str = ""
    items: List[SubmissionItemIn] = []


class SubmissionItem(BaseModel):
    item_id: str
    status: str
    comment: str


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    checklist_id: str
    date: str
    location: str
    performed_by: str
    items: List[SubmissionItem]
    created_at: datetime
    checklist_title: str = ""


class SubmissionDetail(SubmissionResponse):
    category_name: str
    # Item texts of the checklist as it is now; empty once it is deleted
    checklist_items: List[ChecklistItem] = []


# ── Categories ───────────────────────────────────────────────────────────────

@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(db: Session = Depends(get_db)):
    """Categories with their checklists, for the management screen."""
    return checklist_service.list_categories(db)


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(category_in: CategoryIn, db: Session = Depends(get_db)):
    return checklist_service.add_category(db, category_in.name)


@router.put("/categories/{category_id}", response_model=CategoryResponse)
def update_category(category_id: str, category_in: CategoryIn, db: Session = Depends(get_db)):
    return checklist_service.edit_category(db, category_id, category_in.name)


@router.delete("/categories/{category_id}", response_model=CategoryDeleted)
def delete_category(category_id: str, db: Session = Depends(get_db)):
    """Deletes the category and every checklist in it. Submissions are kept."""
    return CategoryDeleted(checklists_removed=checklist_service.delete_category(db, category_id))


# ── Submissions ──────────────────────────────────────────────────────────────

@router.get("/submissions", response_model=List[SubmissionResponse])
def submission_history(
    search: Optional[str] = Query(None, description="Checklist title, location or performer"),
    db: Session = Depends(get_db),
):
    results = []
    for row in checklist_service.submission_history(db, search):
        response = SubmissionResponse.model_validate(row["submission"])
        response.checklist_title = row["checklist_title"]
        results.append(response)
    return results


@router.post("/submissions", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def perform_checklist(submission_in: SubmissionCreate, db: Session = Depends(get_db)):
    submission = checklist_service.add_submission(
        db,
        submission_in.checklist_id,
        [item.model_dump() for item in submission_in.items],
        location=submission_in.location,
        performed_by=submission_in.performed_by,
    )
    detail = checklist_service.submission_detail(db, submission.id)
    response = SubmissionResponse.model_validate(submission)
    response.checklist_title = detail["checklist_title"]
    return response


@router.get("/submissions/{submission_id}", response_model=SubmissionDetail)
def get_submission(submission_id: str, db: Session = Depends(get_db)):
    detail = checklist_service.submission_detail(db, submission_id)
    checklist = detail["checklist"]
    return SubmissionDetail(
        **SubmissionResponse.model_validate(detail["submission"]).model_dump(exclude={"checklist_title"}),
        checklist_title=detail["checklist_title"],
        category_name=detail["category_name"],
        checklist_items=checklist.items if checklist else [],
    )


# ── Checklists ───────────────────────────────────────────────────────────────

@router.get("", response_model=List[ChecklistResponse])
def list_checklists(category_id: Optional[str] = None, db: Session = Depends(get_db)):
    return checklist_service.list_checklists(db, category_id)


@router.post("", response_model=ChecklistResponse, status_code=status.HTTP_201_CREATED)
def create_checklist(checklist_in: ChecklistCreate, db: Session = Depends(get_db)):
    return checklist_service.add_checklist(
        db,
        checklist_in.category_id,
        checklist_in.title,
        [item.model_dump() for item in checklist_in.items],
    )


@router.get("/{checklist_id}", response_model=ChecklistResponse)
def get_checklist(checklist_id: str, db: Session = Depends(get_db)):
    return checklist_service.get_checklist(db, checklist_id)


@router.put("/{checklist_id}", response_model=ChecklistResponse)
def update_checklist(checklist_id: str, checklist_in: ChecklistUpdate, db: Session = Depends(get_db)):
    return checklist_service.edit_checklist(
        db,
        checklist_id,
        checklist_in.title,
        [item.model_dump() for item in checklist_in.items],
    )


@router.delete("/{checklist_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_checklist(checklist_id: str, db: Session = Depends(get_db)):
    checklist_service.delete_checklist(db, checklist_id)
