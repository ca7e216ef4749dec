"""Closed translation tables and phrase builders for generated text."""

from __future__ import annotations

from ..config import Language

EMOTIONS = ("neutral", "happy", "sad", "angry", "fearful", "disgusted", "surprised")
POSITIONS = ("left", "center", "right")

# COCO categories as reported by the object detector.
OBJECT_TRANSLATIONS: dict[Language, dict[str, str]] = {
    Language.PL: {
        "person": "osoba", "dog": "pies", "cat": "kot", "car": "samochód",
        "motorcycle": "motocykl", "bus": "autobus", "train": "pociąg",
        "truck": "ciężarówka", "boat": "łódź", "traffic light": "sygnalizacja świetlna",
        "fire hydrant": "hydrant", "stop sign": "znak stop", "stop": "znak stop",
        "parking meter": "parkometr", "bench": "ławka", "bird": "ptak", "horse": "koń",
        "sheep": "owca", "cow": "krowa", "elephant": "słoń", "bear": "niedźwiedź",
        "zebra": "zebra", "giraffe": "żyrafa", "backpack": "plecak", "umbrella": "parasol",
        "handbag": "torebka", "tie": "krawat", "suitcase": "walizka", "frisbee": "frisbee",
        "skis": "narty", "snowboard": "snowboard", "sports ball": "piłka sportowa",
        "kite": "latawiec", "baseball bat": "kij baseballowy", "baseball glove": "rękawica",
        "skateboard": "deskorolka", "surfboard": "deska surfingowa",
        "tennis racket": "rakieta", "bottle": "butelka", "wine glass": "kieliszek",
        "cup": "kubek", "fork": "widelec", "knife": "nóż", "spoon": "łyżka", "bowl": "miska",
        "banana": "banan", "apple": "jabłko", "sandwich": "kanapka", "orange": "pomarańcza",
        "broccoli": "brokuły", "carrot": "marchewka", "hot dog": "hot dog", "pizza": "pizza",
        "donut": "pączek", "cake": "ciasto", "chair": "krzesło", "couch": "kanapa",
        "potted plant": "roślina doniczkowa", "bed": "łóżko", "dining table": "stół",
        "toilet": "toaleta", "tv": "telewizor", "laptop": "laptop", "mouse": "mysz",
        "remote": "pilot", "keyboard": "klawiatura", "cell phone": "telefon",
        "microwave": "mikrofalówka", "oven": "piekarnik", "toaster": "toster", "sink": "zlew",
        "refrigerator": "lodówka", "book": "książka", "clock": "zegar", "vase": "wazon",
        "scissors": "nożyczki", "teddy bear": "pluszowy miś", "hair drier": "suszarka",
        "toothbrush": "szczoteczka",
    },
}

SCENE_TRANSLATIONS: dict[Language, dict[str, str]] = {
    Language.PL: {
        "seashore": "wybrzeże / plaża", "lakeside": "nad jeziorem", "mountain": "góry",
        "valley": "dolina", "forest": "las", "library": "biblioteka", "office": "biuro",
        "restaurant": "restauracja", "street": "ulica", "park": "park", "garden": "ogród",
        "living room": "salon", "kitchen": "kuchnia", "bedroom": "sypialnia",
        "classroom": "sala lekcyjna", "gym": "siłownia", "hospital": "szpital",
    },
}

EMOTION_NAMES: dict[Language, dict[str, str]] = {
    Language.EN: {
        "neutral": "Neutral", "happy": "Happy", "sad": "Sad", "angry": "Angry",
        "fearful": "Fearful", "disgusted": "Disgusted", "surprised": "Surprised",
    },
    Language.PL: {
        "neutral": "Neutralny", "happy": "Radość", "sad": "Smutek", "angry": "Gniew",
        "fearful": "Strach", "disgusted": "Obrzydzenie", "surprised": "Zaskoczenie",
    },
}

# Nouns used in descriptions ("Man (on left, Happy)").
PERSON_NOUNS: dict[Language, dict[str, str]] = {
    Language.EN: {"male": "Man", "female": "Woman"},
    Language.PL: {"male": "Mężczyzna", "female": "Kobieta"},
}

# Adjectives used in the legacy age summary ("Person approx. 30 years (Male)").
GENDER_NAMES: dict[Language, dict[str, str]] = {
    Language.EN: {"male": "Male", "female": "Female"},
    Language.PL: {"male": "Mężczyzna", "female": "Kobieta"},
}

POSITION_NAMES: dict[Language, dict[str, str]] = {
    Language.EN: {"left": "on left", "center": "center", "right": "on right"},
    Language.PL: {"left": "po lewej", "center": "w środku", "right": "po prawej"},
}

PHRASES: dict[Language, dict[str, str]] = {
    Language.EN: {
        "scene": "Scene: {scene}.",
        "unknown_scene": "unknown",
        "objects": "Detected: {objects}.",
        "faces": "Faces: {faces}.",
        "face_count": "Detected {count} faces. ",
        "age": "{prefix}Person approx. {age} years ({gender})",
        "emotion": "{emotion} ({percent}%)",
        "unknown_error": "Unknown error",
    },
    Language.PL: {
        "scene": "Sceneria: {scene}.",
        "unknown_scene": "nieznana",
        "objects": "Wykryto: {objects}.",
        "faces": "Twarze: {faces}.",
        "face_count": "Wykryto {count} twarze. ",
        "age": "{prefix}Osoba ok. {age} lat ({gender})",
        "emotion": "{emotion} ({percent}%)",
        "unknown_error": "Nieznany błąd",
    },
}

OCR_LANGUAGE_HINTS: dict[Language, str] = {
    Language.EN: "eng",
    Language.PL: "pol",
}


def translate_object(category: str, language: Language) -> str:
    """Translate a raw object category; unknown categories pass through."""
    return OBJECT_TRANSLATIONS.get(language, {}).get(category, category)


def translate_scene(label: str, language: Language) -> str:
    """Translate a normalized scene label; unknown labels pass through."""
    return SCENE_TRANSLATIONS.get(language, {}).get(label, label)


def emotion_name(emotion: str, language: Language) -> str:
    return EMOTION_NAMES[language].get(emotion, emotion)


def person_noun(gender: str, language: Language) -> str:
    nouns = PERSON_NOUNS[language]
    return nouns["male"] if gender == "male" else nouns["female"]


def gender_name(gender: str, language: Language) -> str:
    names = GENDER_NAMES[language]
    return names["male"] if gender == "male" else names["female"]


def position_name(position: str, language: Language) -> str:
    return POSITION_NAMES[language][position]


def phrase(key: str, language: Language, **values: object) -> str:
    return PHRASES[language][key].format(**values)
