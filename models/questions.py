#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Eunoia Journal - Question catalogue and answer labels

Every theme has eight fixed questions. Each question has its own wording for
the three possible answers, so the labels live in a static table indexed by
theme and question position rather than being derived from the score.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from models.enums import Theme
from models.scores import NEGATIVE, NEUTRAL, POSITIVE, coerce_question_score

QUESTIONS_PER_THEME = 8

NOT_ANSWERED_LABEL = "N/A"


@dataclass(frozen=True)
class AnswerLabels:
    """Answer wording for one question"""
    negative: str
    neutral: str
    positive: str

    def for_score(self, score: float) -> str:
        if score == NEGATIVE:
            return self.negative
        if score == POSITIVE:
            return self.positive
        return self.neutral


GENERIC_LABELS = AnswerLabels("Negative", "Neutral", "Positive")

THEME_LABELS: Dict[str, str] = {
    Theme.DREAMING.value: "Sen",
    Theme.MOOD_SCORE.value: "Nastawienie",
    Theme.TRAINING.value: "Fitness",
    Theme.DIET.value: "Odżywianie",
    Theme.SOCIAL_RELATIONS.value: "Relacje zewnętrzne",
    Theme.FAMILY_RELATIONS.value: "Relacje rodzinne",
    Theme.SELF_EDUCATION.value: "Rozwój intelektualny",
}

QUESTIONS: Dict[str, List[str]] = {
    Theme.DREAMING.value: [
        "O której położyłeś się do łóżka?",
        "Jak szybko usnąłeś?",
        "O której się obudziłeś?",
        "Czy był potrzebny budzik?",
        "Czy budziłeś się w nocy?",
        "Czy czułeś się wyspany?",
        "Jakie miałeś sny?",
        "Czy uniknąłeś nadmiernych bodźców przed snem?",
    ],
    Theme.MOOD_SCORE.value: [
        "Jak się czujesz fizycznie?",
        "Jaki masz nastrój?",
        "Czy czujesz lęk przed nadchodzącym dniem?",
        "Czy zaplanowałeś dzień?",
        "Czy zwizualizowałeś swoje życiowe priorytety?",
        "Czy skupiłeś się na wdzięczności?",
        "Czy zacząłeś dzień od pozytywnej afirmacji?",
        "Czy zapisałem jakąś myśl?",
    ],
    Theme.TRAINING.value: [
        "Ile czasu byłeś na świeżym powietrzu?",
        "Ile zrobiłeś kroków?",
        "Ile spaliłeś kalorii?",
        "Ile czasu poświęciłeś na trening?",
        "Czy był trening mięśni?",
        "Czy robiłeś stretching?",
        "Czy robiłeś ćwiczenia oddechowe?",
        "Czy chodziłeś po schodach?",
    ],
    Theme.DIET.value: [
        "Nawodnienie",
        "Jaka zmiana masy?",
        "W jakich godzinach jadłeś?",
        "Co jadłeś na główny posiłek?",
        "Czy jadłeś słodycze?",
        "Czy piłeś alkohol?",
        "Ile razy jadłeś warzywa i owoce?",
        "Jakie miałeś ciśnienie?",
    ],
    Theme.SOCIAL_RELATIONS.value: [
        "Jak zachowałeś się podczas dojazdów?",
        "Czy odbyłeś konstruktywną rozmowę szefem?",
        "Czy miałeś smalltalk z kimś obcym?",
        "Czy pochwaliłeś współpracownika?",
        "Czy byłeś aktywny na spotkaniu?",
        "Czy dogryzałem innym?",
        "Czy byłem asertywny wobec innych?",
        "Zainicjowałem kontakt z jakąś osobą?",
    ],
    Theme.FAMILY_RELATIONS.value: [
        "Czy rozmawiałeś z rodzicami/teściami?",
        "Czy poświęciłeś uwagę żonie?",
        "Czy poświęciłeś uwagę synowi?",
        "Czy pomogłeś w obowiązkach domowych?",
        "Czy zrobiłeś przyjemność żonie?",
        "Czy pomogłeś w lekcjach?",
        "Czy zorganizowałeś wspólne spędzenie czasu?",
        "Czy zakończyliście dzień w miłej atmosferze?",
    ],
    Theme.SELF_EDUCATION.value: [
        "Czy poświęciłeś czas na czytanie?",
        "Czy uczyłeś się języka obcego?",
        "Czy obejrzałeś/wysłuchałeś coś wartościowego?",
        "Czy uczyłeś się programowania?",
        "Czy zrobiłeś kurs/quiz on-line?",
        "Podałeś nowy pomysł na coś?",
        "Poświęciłeś czas finansom?",
        "Pracowałeś nad Eunoią?",
    ],
}

# (negative, neutral, positive) per question
ANSWER_LABELS: Dict[str, List[AnswerLabels]] = {
    Theme.DREAMING.value: [
        AnswerLabels("po g. 23", "między g. 22 a 23", "przed g. 22"),
        AnswerLabels("Ponad godzinę", "ok. pół godziny", "ok. kwadrans"),
        AnswerLabels("po g. 7", "ok. 6:30", "ok. g. 6"),
        AnswerLabels("Musiał dzwonić kilka razy", "Wstałem po jednym dzwonku", "Wstałem przed budzikiem"),
        AnswerLabels("tak i miałem problem z ponownym zaśnięciem", "tak, na krótko", "nie"),
        AnswerLabels("Byłem nieprzytomny", "Lekko niedospany", "Tak, pełen energii"),
        AnswerLabels("Koszmary", "Neutralne / Nie pamiętam", "Przyjemne"),
        AnswerLabels("Nie", "Częściowo", "Tak"),
    ],
    Theme.MOOD_SCORE.value: [
        AnswerLabels("ból/infekcja", "średnio/zmęczenie", "znakomicie"),
        AnswerLabels("przygnębienie/smutek", "neutralny", "entuzjastyczny"),
        AnswerLabels("boję się", "mam stres", "brak lęku"),
        AnswerLabels("brak planu", "jest plan ogólny", "plan z checklistą"),
        AnswerLabels("zapomniałem", "próbowałem ale rozproszyłem się", "mam focus na cel"),
        AnswerLabels("nie", "na chwilę ale mało konkretnie", "tak dogłębnie"),
        AnswerLabels("nie", "tak ale mało przekonująco", "tak i podziałało"),
        AnswerLabels("nie", "tak ale nic istotnego", "tak coś wartościowego"),
    ],
    Theme.TRAINING.value: [
        AnswerLabels("poniżej 30 min.", "ok. 45 min.", "ponad godzinę"),
        AnswerLabels("mniej niż 4k", "4-6k", "powyżej 6k"),
        AnswerLabels("mniej niż 300", "300-500", "powyżej 500"),
        AnswerLabels("mniej niż 15 min", "15-30 min", "ponad 45 min"),
        AnswerLabels("nie", "częściowy", "3 partie ciała"),
        AnswerLabels("nie", "częściowy", "pełny"),
        AnswerLabels("nie", "powierzchownie", "gruntownie"),
        AnswerLabels("nie", "do 3 p.", "więcej niż 3 p."),
    ],
    Theme.DIET.value: [
        AnswerLabels("<1 litr", "1-2 litry", ">2 litry"),
        AnswerLabels("wzrost o ponad 0,3 kg", "bez zmian", "spadek o ponad 0,3 kg"),
        AnswerLabels("za wcześnie i za późno", "przekroczony jeden czas", "w godz. 10-20"),
        AnswerLabels("przetworzone/wieprzowina", "drób/wołowina", "ryba/vege"),
        AnswerLabels("tak", "raz i mało", "nie"),
        AnswerLabels("tak", "lampkę wina", "nie"),
        AnswerLabels("wcale", "2-3 razy", "4 i więcej"),
        AnswerLabels("90 i więcej", "85-89", "do 84"),
    ],
    Theme.SOCIAL_RELATIONS.value: [
        AnswerLabels("agresywnie", "poprawnie", "przyjaźnie"),
        AnswerLabels("negatywne emocje", "neutralnie/brak", "budujące emocje"),
        AnswerLabels("nie mimo okazji", "brak okazji", "zainicjowałem rozmowę"),
        AnswerLabels("nie", "tak ale słabo", "tak wzmacniająco"),
        AnswerLabels("nie mimo okazji", "brak okazji", "tak wyraziłem swoje zdanie"),
        AnswerLabels("tak przesadnie", "raz niewinnie", "nie"),
        AnswerLabels("nie, a było trzeba", "nie było potrzeby", "tak"),
        AnswerLabels("nie mimo przestrzeni", "podjąłem próbę", "tak i fajnie wyszło"),
    ],
    Theme.FAMILY_RELATIONS.value: [
        AnswerLabels("nie mimo wolnego czasu", "tak krótko", "tak z zaangażowaniem"),
        AnswerLabels("nie", "krótko i pobieżnie", "tak z uważnością"),
        AnswerLabels("nie", "krótko i pobieżnie", "tak z uważnością"),
        AnswerLabels("nie", "drobne rzeczy", "duży wkład"),
        AnswerLabels("nie", "drobną", "przyłożyłem się"),
        AnswerLabels("nie", "nie było potrzeby", "tak"),
        AnswerLabels("nie mimo okazji", "brak przestrzeni", "tak wyszło ok"),
        AnswerLabels("awantura", "było ok", "było miło"),
    ],
    Theme.SELF_EDUCATION.value: [
        AnswerLabels("nie", "krótko, bez skupienia", "ponad 30 min uważnie"),
        AnswerLabels("nie", "krótko, bez skupienia", "ponad 30 min"),
        AnswerLabels("nie", "fragmentarycznie", "tak do wykorzystania"),
        AnswerLabels("nie", "fragmentarycznie", "tak 30 min"),
        AnswerLabels("nie", "tylko quiz", "tak przydatny"),
        AnswerLabels("nie", "tak ale bez zastosowania", "tak do wykorzystania"),
        AnswerLabels("nie", "tylko analiza konta", "tak z inwestycjami"),
        AnswerLabels("nie", "pobieżnie", "gruntownie"),
    ],
}


def theme_key(theme: Union[Theme, str]) -> str:
    """Accepts a Theme or its raw identifier"""
    return theme.value if isinstance(theme, Theme) else str(theme)


def theme_label(theme: Union[Theme, str]) -> str:
    key = theme_key(theme)
    return THEME_LABELS.get(key, key)


def questions_for(theme: Union[Theme, str]) -> List[str]:
    """Question texts for a theme.

    Themes outside the fixed catalogue get a deterministic placeholder set so
    callers always see exactly eight questions.
    """
    key = theme_key(theme)
    if key in QUESTIONS:
        return list(QUESTIONS[key])
    label = theme_label(key)
    return [f"Placeholder Question {i + 1} for {label}?" for i in range(QUESTIONS_PER_THEME)]


def label_for(theme: Union[Theme, str], question_index: int, score: Optional[float]) -> str:
    """Human-readable answer for one question score. Never raises."""
    value = coerce_question_score(score)
    if value is None:
        return NOT_ANSWERED_LABEL

    labels = ANSWER_LABELS.get(theme_key(theme))
    if labels is None or not isinstance(question_index, int) or not 0 <= question_index < len(labels):
        return GENERIC_LABELS.for_score(value)
    return labels[question_index].for_score(value)


def parse_score_token(token: str) -> float:
    """Parses CLI score input: '-', '0', '+' or a numeric value"""
    aliases = {"-": NEGATIVE, "0": NEUTRAL, "+": POSITIVE}
    token = token.strip()
    if token in aliases:
        return aliases[token]
    try:
        value = coerce_question_score(float(token.replace(",", ".")))
    except ValueError:
        value = None
    if value is None:
        raise ValueError(f"Score must be one of -, 0, +, -0.25, 0.25 (got {token!r})")
    return value
