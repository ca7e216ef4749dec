"""Pure derivations from normalized signals: faces, summaries, description, labels."""

from __future__ import annotations

import math
from typing import Iterable, Mapping, Sequence

from ..config import Language
from ..models.base import BoundingBox, RawFace
from ..records import FaceDetail
from ..utils.text import capitalize_first, unique
from ..utils.translations import (
    EMOTIONS,
    emotion_name,
    gender_name,
    person_noun,
    phrase,
    position_name,
)

LEFT_BOUNDARY = 0.33
RIGHT_BOUNDARY = 0.66


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def face_position(box: BoundingBox, image_width: float) -> str:
    """Classify a face as left, center or right from its box center.

    A center exactly on the left boundary counts as ``left``.
    """
    center = box.center_x
    if center <= image_width * LEFT_BOUNDARY:
        return "left"
    if center > image_width * RIGHT_BOUNDARY:
        return "right"
    return "center"


def top_emotion(expressions: Mapping[str, float]) -> tuple[str, float]:
    """Return the most probable known emotion; the first one wins a tie."""
    best: tuple[str, float] | None = None
    for label, score in expressions.items():
        if label not in EMOTIONS:
            continue
        if best is None or score > best[1]:
            best = (label, float(score))
    return best or ("neutral", 0.0)


def _unit(value: float) -> float:
    return min(1.0, max(0.0, float(value)))


def build_faces(raw_faces: Iterable[RawFace], image_width: float) -> tuple[FaceDetail, ...]:
    """Normalize raw detections and order them left to right by box x."""
    details: list[FaceDetail] = []
    for raw in raw_faces:
        emotion, score = top_emotion(raw.expressions)
        details.append(
            FaceDetail(
                age=max(0, round_half_up(raw.age)),
                gender=raw.gender.strip().lower(),
                gender_probability=_unit(raw.gender_probability),
                emotion=emotion,
                emotion_score=_unit(score),
                position=face_position(raw.box, image_width),
                box=raw.box,
            )
        )
    details.sort(key=lambda face: face.box.x)
    return tuple(details)


def legacy_summaries(
    faces: Sequence[FaceDetail],
    language: Language,
    *,
    emotion_threshold: float = 0.1,
) -> tuple[str | None, str | None]:
    """Derive the single-value age and emotion summaries from the face sequence.

    The age summary averages every face and names the gender of the leftmost
    one. The emotion summary describes the leftmost face and is omitted when
    its score does not exceed ``emotion_threshold``.
    """
    if not faces:
        return None, None

    first = faces[0]
    average_age = round_half_up(sum(face.age for face in faces) / len(faces))
    prefix = phrase("face_count", language, count=len(faces)) if len(faces) > 1 else ""
    age_estimate = phrase(
        "age",
        language,
        prefix=prefix,
        age=average_age,
        gender=gender_name(first.gender, language),
    )

    emotion_estimate = None
    if first.emotion_score > emotion_threshold:
        emotion_estimate = phrase(
            "emotion",
            language,
            emotion=emotion_name(first.emotion, language),
            percent=round_half_up(first.emotion_score * 100),
        )
    return age_estimate, emotion_estimate


def build_description(
    scenery: str,
    objects: Sequence[str],
    faces: Sequence[FaceDetail],
    language: Language,
) -> str:
    """Scene sentence, then objects, then one clause per face (left to right)."""
    sentences = [phrase("scene", language, scene=scenery or phrase("unknown_scene", language))]
    if objects:
        sentences.append(phrase("objects", language, objects=", ".join(unique(objects))))
    if faces:
        clauses = [
            f"{person_noun(face.gender, language)} "
            f"({position_name(face.position, language)}, {emotion_name(face.emotion, language)})"
            for face in faces
        ]
        sentences.append(phrase("faces", language, faces="; ".join(clauses)))
    return " ".join(sentences)


def build_labels(scenery: str, objects: Sequence[str]) -> tuple[str, ...]:
    return tuple(unique(capitalize_first(label) for label in (scenery, *objects) if label))


def normalize_scene_label(label: str) -> str:
    """Keep the first synonym of labels such as ``"seashore, coast, seacoast"``."""
    return label.split(",")[0].strip().lower()
