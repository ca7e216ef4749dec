"""Tests for the concrete providers using stand-ins for the inference libraries."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from PIL import Image

from photo_insight.config import AppConfig
from photo_insight.models import faces as faces_module
from photo_insight.models import ocr as ocr_module
from photo_insight.models import scene as scene_module
from photo_insight.models import yolo as yolo_module
from photo_insight.models.base import BoundingBox, ProviderError


SURFACE = Image.new("RGB", (200, 100), color=(30, 60, 90))


@pytest.fixture(autouse=True)
def cpu_only(monkeypatch):
    for module in (yolo_module, scene_module, faces_module):
        monkeypatch.setattr(module, "detect_torch_device", lambda preference: ("cpu", "cpu"))


def test_yolo_requires_ultralytics(monkeypatch):
    monkeypatch.setattr(yolo_module, "YOLO", None)

    with pytest.raises(ProviderError, match="ultralytics"):
        yolo_module.YoloObjectDetector().load()


def test_yolo_maps_boxes_to_categories(monkeypatch):
    calls = {}

    class FakeYOLO:
        def __init__(self, weights):
            calls["weights"] = weights

        def __call__(self, surface, **kwargs):
            calls.update(kwargs)
            boxes = [SimpleNamespace(cls=16.0, conf=0.93), SimpleNamespace(cls=0.0, conf=0.61)]
            return [SimpleNamespace(boxes=boxes, names={0: "person", 16: "dog"})]

    monkeypatch.setattr(yolo_module, "YOLO", FakeYOLO)
    detector = yolo_module.YoloObjectDetector(AppConfig(object_confidence=0.4))
    detector.load()

    detections = detector.detect(SURFACE)

    assert [(item.category, item.score) for item in detections] == [
        ("dog", pytest.approx(0.93)),
        ("person", pytest.approx(0.61)),
    ]
    assert calls["weights"] == "yolo11n.pt"
    assert calls["conf"] == 0.4
    assert calls["device"] == "cpu"


def test_yolo_detect_before_load():
    with pytest.raises(ProviderError):
        yolo_module.YoloObjectDetector().detect(SURFACE)


def test_scene_pipeline_outputs_are_sorted(monkeypatch):
    created = {}

    def fake_pipeline(task, model, device):
        created.update(task=task, model=model, device=device)

        def run(surface, top_k):
            created["top_k"] = top_k
            return [
                {"label": "street", "score": 0.1},
                {"label": "seashore, coast, seacoast", "score": 0.7},
            ]

        return run

    monkeypatch.setattr(scene_module, "pipeline", fake_pipeline)
    classifier = scene_module.TransformersSceneClassifier(AppConfig(scene_top_k=5))
    classifier.load()

    predictions = classifier.classify(SURFACE)

    assert [item.label for item in predictions] == ["seashore, coast, seacoast", "street"]
    assert created == {
        "task": "image-classification",
        "model": "google/vit-base-patch16-224",
        "device": -1,
        "top_k": 5,
    }


def test_scene_requires_transformers(monkeypatch):
    monkeypatch.setattr(scene_module, "pipeline", None)

    with pytest.raises(ProviderError, match="transformers"):
        scene_module.TransformersSceneClassifier().load()


def test_tesseract_missing_binary(monkeypatch):
    def no_binary():
        raise OSError("tesseract is not installed")

    monkeypatch.setattr(ocr_module, "pytesseract", SimpleNamespace(get_tesseract_version=no_binary))

    with pytest.raises(ProviderError, match="not available"):
        ocr_module.TesseractTextRecognizer().load()


def test_tesseract_passes_language_hint(monkeypatch):
    seen = {}

    def image_to_string(surface, lang):
        seen["lang"] = lang
        return "STOP\n"

    fake = SimpleNamespace(get_tesseract_version=lambda: "5.3.0", image_to_string=image_to_string)
    monkeypatch.setattr(ocr_module, "pytesseract", fake)
    recognizer = ocr_module.TesseractTextRecognizer()
    recognizer.load()

    assert recognizer.recognize(SURFACE, "pol") == "STOP\n"
    assert seen["lang"] == "pol"


def test_fold_scores_maps_aliases():
    outputs = [
        {"label": "Happy", "score": 0.6},
        {"label": "contempt", "score": 0.2},
        {"label": "surprise", "score": 0.1},
    ]

    assert faces_module.fold_scores(outputs, faces_module.EXPRESSION_ALIASES) == {
        "happy": 0.6,
        "surprised": 0.1,
    }
    assert faces_module.fold_scores(None, faces_module.GENDER_ALIASES) == {}


def test_faces_requires_insightface(monkeypatch):
    monkeypatch.setattr(faces_module, "FaceAnalysis", None)

    with pytest.raises(ProviderError, match="insightface"):
        faces_module.InsightFaceAnalyzer().load()


def test_faces_detect_clamps_boxes_and_classifies_crops(monkeypatch):
    np = pytest.importorskip("numpy")
    crops = []

    class FakeApp:
        def get(self, bgr):
            assert bgr.shape == (100, 200, 3)
            return [
                SimpleNamespace(
                    bbox=(-5.0, 10.0, 40.0, 60.0),
                    age=29,
                    sex="F",
                    kps=[(10.0, 20.0), (30.0, 20.0)],
                ),
                SimpleNamespace(bbox=(50.0, 50.0, 50.0, 80.0), age=40, sex="M"),
            ]

    def emotion(crop, top_k):
        crops.append(crop.size)
        return [{"label": "happy", "score": 0.75}, {"label": "neutral", "score": 0.2}]

    def gender(crop, top_k):
        return [{"label": "female", "score": 0.88}, {"label": "male", "score": 0.12}]

    monkeypatch.setattr(faces_module, "np", np)
    analyzer = faces_module.InsightFaceAnalyzer()
    analyzer._app = FakeApp()
    analyzer._emotion = emotion
    analyzer._gender = gender

    (face,) = analyzer.detect_faces(SURFACE)

    assert face.box == BoundingBox(x=0.0, y=10.0, width=40.0, height=50.0)
    assert face.age == 29.0
    assert face.gender == "female"
    assert face.gender_probability == pytest.approx(0.88)
    assert face.expressions == {"happy": 0.75, "neutral": 0.2}
    assert face.landmarks == ((10.0, 20.0), (30.0, 20.0))
    assert crops == [(40, 50)]


def test_faces_gender_falls_back_to_detector(monkeypatch):
    np = pytest.importorskip("numpy")

    class FakeApp:
        def get(self, bgr):
            return [SimpleNamespace(bbox=(10.0, 10.0, 50.0, 50.0), age=35, sex="M")]

    monkeypatch.setattr(faces_module, "np", np)
    analyzer = faces_module.InsightFaceAnalyzer()
    analyzer._app = FakeApp()
    analyzer._emotion = lambda crop, top_k: []
    analyzer._gender = lambda crop, top_k: []

    (face,) = analyzer.detect_faces(SURFACE)

    assert face.gender == "male"
    assert face.gender_probability == 0.5
    assert face.expressions == {}
    assert face.landmarks == ()
