"""Tests for prompt builders."""

from content_studio.content import prompts
from content_studio.content.models import BrandVoiceProfile, PostFormat, Source, Tone


class TestSystemInstructions:
    """Test tone, format and brand voice assembly."""

    def test_default_audience_and_tone(self):
        system = prompts.tweet_system_instruction()
        assert "el público en general." in system
        assert prompts.DEFAULT_TONE_INSTRUCTION in system
        assert "Formato Específico" not in system

    def test_enum_and_string_tone_are_equivalent(self):
        assert prompts.tone_instruction(Tone.ANALYTICAL) == prompts.tone_instruction("analytical")

    def test_unknown_tone_falls_back(self):
        assert prompts.tone_instruction("sarcastic") == prompts.DEFAULT_TONE_INSTRUCTION

    def test_default_format_adds_nothing(self):
        system = prompts.thread_system_instruction(post_format=PostFormat.DEFAULT)
        assert "Formato Específico" not in system

    def test_thread_keywords_scope(self):
        system = prompts.thread_system_instruction(keywords="IVA")
        assert 'a lo largo del hilo: "IVA"' in system

    def test_empty_brand_voice_is_ignored(self):
        assert prompts.brand_voice_instruction(BrandVoiceProfile()) == ""
        assert prompts.brand_voice_instruction(None) == ""

    def test_brand_voice_placeholders(self):
        block = prompts.brand_voice_instruction(BrandVoiceProfile(key_topics="ahorro"))
        assert "**Temas Clave a Integrar**: ahorro" in block
        assert "**Temas a Evitar**: No especificado." in block

    def test_json_vs_delimited_rules(self):
        assert "NO uses formato JSON" in prompts.thread_system_instruction(use_web_search=True)
        assert "NO uses formato JSON" not in prompts.thread_system_instruction()


class TestTaskPrompts:
    """Test the per-operation prompts."""

    def test_grounded_prompt_without_source(self):
        assert prompts.grounded_prompt("hola", None) == "hola"

    def test_grounded_prompt_with_source(self):
        text = prompts.grounded_prompt("hola", Source(uri="https://a.com", title="A"))
        assert text.endswith("escribe contenido sobre: hola")

    def test_proofread_keeps_accents(self):
        assert '["Adiós"]' in prompts.proofread_prompt(["Adiós"])

    def test_video_prompt(self):
        assert prompts.video_prompt("Olas") == "Olas"
        assert prompts.video_prompt("Olas", "anime") == "Olas. Estilo visual: anime."

    def test_refinement_target(self):
        assert "objeto JSON completo" in prompts.refinement_prompt("corto", True)
        assert "texto sin formato para el tuit" in prompts.refinement_prompt("corto", False)
