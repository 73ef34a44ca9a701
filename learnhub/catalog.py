"""
Catalog repository: categories, courses and lessons

Slugs are derived from the display title and must be unique per table.
Deleting something that still has dependents needs cascade=True; the
routers map that to ?confirm=true.
"""

import logging
import re
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from .errors import ConflictError, NotFoundError, ValidationError
from .models import Category, Course, Enrollment, Lesson, Review, User
from .schemas import CategoryCreate, CategoryUpdate, CourseCreate, CourseUpdate, LessonCreate, LessonUpdate

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")

# Columns an update may explicitly clear
COURSE_NULLABLE = {"long_description", "price", "original_price"}
LESSON_NULLABLE = {"content", "video_url"}


def slugify(title: str) -> str:
    """'Intro to Python 3!' -> 'intro-to-python-3'"""
    return _NON_ALNUM.sub("-", title.lower()).strip("-")


def _derive_slug(title: str, field: str) -> str:
    slug = slugify(title)
    if not slug:
        raise ValidationError.for_field(field, "Must contain at least one letter or digit")
    return slug


def _ensure_unique_slug(db: Session, model, slug: str, label: str, exclude_id: Optional[int] = None):
    query = db.query(model.id).filter(model.slug == slug)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first():
        raise ConflictError(f"{label} with this title already exists")


def _commit_unique(db: Session, label: str):
    try:
        db.commit()
    except IntegrityError:
        # a concurrent writer took the slug between our check and the insert
        db.rollback()
        raise ConflictError(f"{label} with this title already exists")


def _changes(data, nullable=frozenset()) -> dict:
    fields = data.model_dump(exclude_unset=True)
    return {k: v for k, v in fields.items() if v is not None or k in nullable}


# ==================== CATEGORIES ====================

def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def get_category(db: Session, category_id: int) -> Category:
    category = db.query(Category).filter(Category.id == category_id).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def get_category_by_slug(db: Session, slug: str) -> Category:
    category = db.query(Category).filter(Category.slug == slug).first()
    if not category:
        raise NotFoundError("Category not found")
    return category


def create_category(db: Session, data: CategoryCreate) -> Category:
    slug = _derive_slug(data.name, "name")
    _ensure_unique_slug(db, Category, slug, "Category")

    category = Category(name=data.name, slug=slug, description=data.description, image_url=data.image_url)
    db.add(category)
    _commit_unique(db, "Category")
    db.refresh(category)
    logger.info("Created category %s (id=%s)", category.slug, category.id)
    return category


def update_category(db: Session, category_id: int, data: CategoryUpdate) -> Category:
    category = get_category(db, category_id)
    changes = _changes(data)

    if "name" in changes and changes["name"] != category.name:
        slug = _derive_slug(changes["name"], "name")
        _ensure_unique_slug(db, Category, slug, "Category", exclude_id=category.id)
        category.slug = slug

    for key, value in changes.items():
        setattr(category, key, value)
    category.updated_at = datetime.utcnow()

    _commit_unique(db, "Category")
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int, cascade: bool = False) -> None:
    category = get_category(db, category_id)
    course_count = db.query(func.count(Course.id)).filter(Course.category_id == category.id).scalar()
    if course_count and not cascade:
        raise ConflictError(
            "Category still has courses; confirm to delete them as well",
            details={"courses": course_count},
        )

    db.delete(category)
    db.commit()
    logger.info("Deleted category id=%s with %d courses", category_id, course_count)


# ==================== COURSES ====================

def _course_query(db: Session):
    return db.query(Course).options(
        joinedload(Course.category),
        joinedload(Course.instructor).joinedload(User.profile),
    )


def list_courses(db: Session, category_slug: Optional[str] = None) -> List[Course]:
    query = _course_query(db)
    if category_slug:
        category = get_category_by_slug(db, category_slug)
        query = query.filter(Course.category_id == category.id)
    return query.order_by(Course.created_at.desc(), Course.id.desc()).all()


def get_course(db: Session, course_id: int) -> Course:
    course = _course_query(db).filter(Course.id == course_id).first()
    if not course:
        raise NotFoundError("Course not found")
    return course


def get_course_by_slug(db: Session, slug: str) -> Course:
    course = _course_query(db).filter(Course.slug == slug).first()
    if not course:
        raise NotFoundError("Course not found")
    return course


def _ensure_instructor(db: Session, user_id: int):
    if not db.query(User.id).filter(User.id == user_id).first():
        raise NotFoundError("Instructor not found")


def create_course(db: Session, data: CourseCreate, instructor_id: int) -> Course:
    """instructor_id is the creating admin unless the payload names someone else."""
    get_category(db, data.category_id)
    instructor_id = data.instructor_id or instructor_id
    _ensure_instructor(db, instructor_id)

    slug = _derive_slug(data.title, "title")
    _ensure_unique_slug(db, Course, slug, "Course")

    fields = data.model_dump(exclude={"instructor_id"})
    course = Course(**fields, slug=slug, instructor_id=instructor_id, lesson_count=0, review_count=0)
    db.add(course)
    _commit_unique(db, "Course")
    logger.info("Created course %s (id=%s)", course.slug, course.id)
    return get_course(db, course.id)


def update_course(db: Session, course_id: int, data: CourseUpdate) -> Course:
    course = get_course(db, course_id)
    changes = _changes(data, COURSE_NULLABLE)

    if "category_id" in changes:
        get_category(db, changes["category_id"])
    if "instructor_id" in changes:
        _ensure_instructor(db, changes["instructor_id"])
    if "title" in changes and changes["title"] != course.title:
        slug = _derive_slug(changes["title"], "title")
        _ensure_unique_slug(db, Course, slug, "Course", exclude_id=course.id)
        course.slug = slug

    for key, value in changes.items():
        setattr(course, key, value)
    course.updated_at = datetime.utcnow()

    _commit_unique(db, "Course")
    return get_course(db, course_id)


def course_dependents(db: Session, course_id: int) -> Dict[str, int]:
    return {
        "lessons": db.query(func.count(Lesson.id)).filter(Lesson.course_id == course_id).scalar(),
        "enrollments": db.query(func.count(Enrollment.id)).filter(Enrollment.course_id == course_id).scalar(),
        "reviews": db.query(func.count(Review.id)).filter(Review.course_id == course_id).scalar(),
    }


def delete_course(db: Session, course_id: int, cascade: bool = False) -> None:
    course = get_course(db, course_id)
    dependents = course_dependents(db, course.id)
    if any(dependents.values()) and not cascade:
        raise ConflictError(
            "Course still has lessons, enrollments or reviews; confirm to delete them as well",
            details=dependents,
        )

    db.delete(course)
    db.commit()
    logger.info("Deleted course id=%s (%s)", course_id, dependents)


# ==================== LESSONS ====================

def refresh_lesson_count(db: Session, course_id: int) -> None:
    """
    Rewrite courses.lesson_count from the lessons table in one statement.
    Does not commit; runs inside the caller's transaction.
    """
    count = select(func.count(Lesson.id)).where(Lesson.course_id == course_id).scalar_subquery()
    db.execute(
        update(Course)
        .where(Course.id == course_id)
        .values(lesson_count=count, updated_at=datetime.utcnow())
        .execution_options(synchronize_session=False)
    )


def list_lessons(db: Session, course_id: int) -> List[Lesson]:
    get_course(db, course_id)
    return (
        db.query(Lesson)
        .filter(Lesson.course_id == course_id)
        .order_by(Lesson.position.asc(), Lesson.id.asc())
        .all()
    )


def get_lesson(db: Session, course_id: int, lesson_id: int) -> Lesson:
    lesson = db.query(Lesson).filter(Lesson.id == lesson_id, Lesson.course_id == course_id).first()
    if not lesson:
        raise NotFoundError("Lesson not found")
    return lesson


def create_lesson(db: Session, course_id: int, data: LessonCreate) -> Lesson:
    get_course(db, course_id)
    fields = data.model_dump()
    if fields["position"] is None:
        last = db.query(func.max(Lesson.position)).filter(Lesson.course_id == course_id).scalar()
        fields["position"] = (last or 0) + 1

    lesson = Lesson(**fields, course_id=course_id)
    db.add(lesson)
    db.flush()
    refresh_lesson_count(db, course_id)
    db.commit()
    db.refresh(lesson)
    return lesson


def update_lesson(db: Session, course_id: int, lesson_id: int, data: LessonUpdate) -> Lesson:
    lesson = get_lesson(db, course_id, lesson_id)
    for key, value in _changes(data, LESSON_NULLABLE).items():
        setattr(lesson, key, value)
    lesson.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(lesson)
    return lesson


def delete_lesson(db: Session, course_id: int, lesson_id: int) -> None:
    lesson = get_lesson(db, course_id, lesson_id)
    db.delete(lesson)
    db.flush()
    refresh_lesson_count(db, course_id)
    db.commit()
