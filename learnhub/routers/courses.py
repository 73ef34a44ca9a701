# learnhub/routers/courses.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from .. import catalog, config, enrollments, reviews
from ..auth import require_admin, require_user
from ..database import get_db
from ..schemas import (
    CourseCreate,
    CourseOut,
    CourseUpdate,
    EnrollmentOut,
    EnrollmentStatus,
    EnrollmentWithCourse,
    LessonCreate,
    LessonOut,
    LessonUpdate,
    MessageOut,
    ProgressUpdate,
    ReviewCreate,
    ReviewOut,
)
from ..sessions import Identity

router = APIRouter(prefix="/api", tags=["courses"])


# --- Courses (public) ---

@router.get("/courses", response_model=List[CourseOut])
def list_courses(category: Optional[str] = None, db: Session = Depends(get_db)):
    return [CourseOut.model_validate(c) for c in catalog.list_courses(db, category_slug=category)]


@router.get("/courses/slug/{slug}", response_model=CourseOut)
def get_course_by_slug(slug: str, db: Session = Depends(get_db)):
    return CourseOut.model_validate(catalog.get_course_by_slug(db, slug))


@router.get("/courses/{course_id}", response_model=CourseOut)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return CourseOut.model_validate(catalog.get_course(db, course_id))


# --- Courses (admin) ---

@router.post("/courses", response_model=CourseOut, status_code=201)
def create_course(payload: CourseCreate, admin: Identity = Depends(require_admin), db: Session = Depends(get_db)):
    return CourseOut.model_validate(catalog.create_course(db, payload, instructor_id=admin.id))


@router.put("/courses/{course_id}", response_model=CourseOut)
def update_course(
    course_id: int,
    payload: CourseUpdate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return CourseOut.model_validate(catalog.update_course(db, course_id, payload))


@router.delete("/courses/{course_id}", response_model=MessageOut)
def delete_course(
    course_id: int,
    confirm: bool = False,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    catalog.delete_course(db, course_id, cascade=confirm)
    return MessageOut(message="Course deleted successfully")


# --- Lessons ---

@router.get("/courses/{course_id}/lessons", response_model=List[LessonOut])
def list_lessons(course_id: int, db: Session = Depends(get_db)):
    return [LessonOut.model_validate(lesson) for lesson in catalog.list_lessons(db, course_id)]


@router.post("/courses/{course_id}/lessons", response_model=LessonOut, status_code=201)
def create_lesson(
    course_id: int,
    payload: LessonCreate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return LessonOut.model_validate(catalog.create_lesson(db, course_id, payload))


@router.put("/courses/{course_id}/lessons/{lesson_id}", response_model=LessonOut)
def update_lesson(
    course_id: int,
    lesson_id: int,
    payload: LessonUpdate,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return LessonOut.model_validate(catalog.update_lesson(db, course_id, lesson_id, payload))


@router.delete("/courses/{course_id}/lessons/{lesson_id}", response_model=MessageOut)
def delete_lesson(
    course_id: int,
    lesson_id: int,
    admin: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
):
    catalog.delete_lesson(db, course_id, lesson_id)
    return MessageOut(message="Lesson deleted successfully")


# --- Enrollment ---

@router.get("/courses/{course_id}/enrollment", response_model=EnrollmentStatus)
def enrollment_status(course_id: int, user: Identity = Depends(require_user), db: Session = Depends(get_db)):
    catalog.get_course(db, course_id)
    enrollment = enrollments.get_enrollment(db, user.id, course_id)
    return EnrollmentStatus(
        enrolled=enrollment is not None,
        enrollment=EnrollmentOut.model_validate(enrollment) if enrollment else None,
    )


@router.post("/courses/{course_id}/enroll", response_model=EnrollmentOut)
def enroll(
    course_id: int,
    response: Response,
    user: Identity = Depends(require_user),
    db: Session = Depends(get_db),
):
    enrollment, created = enrollments.enroll(db, user.id, course_id)
    response.status_code = 201 if created else 200
    return EnrollmentOut.model_validate(enrollment)


@router.put("/courses/{course_id}/progress", response_model=EnrollmentOut)
def update_progress(
    course_id: int,
    payload: ProgressUpdate,
    user: Identity = Depends(require_user),
    db: Session = Depends(get_db),
):
    return EnrollmentOut.model_validate(enrollments.set_progress(db, user.id, course_id, payload.progress))


@router.get("/enrollments", response_model=List[EnrollmentWithCourse])
def my_enrollments(user: Identity = Depends(require_user), db: Session = Depends(get_db)):
    return [EnrollmentWithCourse.model_validate(e) for e in enrollments.list_for_user(db, user.id)]


# --- Reviews ---

@router.get("/courses/{course_id}/reviews", response_model=List[ReviewOut])
def list_reviews(course_id: int, db: Session = Depends(get_db)):
    return [ReviewOut.model_validate(r) for r in reviews.list_reviews(db, course_id)]


@router.post("/courses/{course_id}/reviews", response_model=ReviewOut)
def create_review(
    course_id: int,
    payload: ReviewCreate,
    response: Response,
    user: Identity = Depends(require_user),
    db: Session = Depends(get_db),
):
    review, created = reviews.create_review(
        db, user.id, course_id, payload, one_per_user=config.ONE_REVIEW_PER_USER
    )
    response.status_code = 201 if created else 200
    return ReviewOut.model_validate(review)
