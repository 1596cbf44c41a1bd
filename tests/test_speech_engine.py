from types import SimpleNamespace

import pytest

import speech_engine


class FakeDriver:
    def __init__(self, voices):
        self.props = {"rate": 200, "voices": voices, "voice": "default"}
        self.saved = []
        self.ran = 0

    def getProperty(self, name):
        return self.props[name]

    def setProperty(self, name, value):
        self.props[name] = value

    def save_to_file(self, text, path):
        self.saved.append((text, path))

    def runAndWait(self):
        self.ran += 1


def voice(id, name, gender=None):
    return SimpleNamespace(id=id, name=name, gender=gender)


@pytest.fixture
def make_engine(monkeypatch):
    def make(voices):
        driver = FakeDriver(voices)
        monkeypatch.setattr(speech_engine.pyttsx3, "init", lambda: driver)
        return speech_engine.Pyttsx3Engine(), driver

    return make


def test_select_voice_by_reported_gender(make_engine):
    engine, driver = make_engine([voice("m", "David", "Male"), voice("f", "Zira", "Female")])
    engine.select_voice("Female")
    assert driver.props["voice"] == "f"


def test_select_voice_falls_back_to_name(make_engine):
    engine, driver = make_engine([voice("f", "english female"), voice("m", "english male")])
    engine.select_voice("Male")
    assert driver.props["voice"] == "m"


def test_select_voice_keeps_default_when_nothing_matches(make_engine):
    engine, driver = make_engine([voice("x", "Alex", "Male")])
    engine.select_voice("Female")
    assert driver.props["voice"] == "default"


def test_set_rate_restores_neutral(make_engine):
    engine, driver = make_engine([])
    engine.set_rate(150)
    assert driver.props["rate"] == 150
    engine.set_rate(None)
    assert driver.props["rate"] == 200


def test_render_to_file(make_engine):
    engine, driver = make_engine([])
    assert engine.render_to_file("Hi.", "/tmp/x.wav") == "/tmp/x.wav"
    assert driver.saved == [("Hi.", "/tmp/x.wav")]
    assert driver.ran == 1


def test_select_voice_nsspeech_gender_names(make_engine):
    engine, driver = make_engine(
        [voice("alex", "Alex", "VoiceGenderMale"), voice("samantha", "Samantha", "VoiceGenderFemale")]
    )
    engine.select_voice("Female")
    assert driver.props["voice"] == "samantha"
    engine.select_voice("Male")
    assert driver.props["voice"] == "alex"
