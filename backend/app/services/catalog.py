from app.models.catalog import CatalogEntry, ModelProvider

ROLEPLAY_PROMPT = (
    "You are a character in an interactive role-play. Stay in character, "
    "keep replies vivid but concise, and follow the user's lead on the story."
)

ASSISTANT_PROMPT = (
    "You are a helpful assistant. Answer clearly, use Markdown for structure "
    "when it helps, and say so when you are not sure."
)

MODEL_LIST: tuple[CatalogEntry, ...] = (
    CatalogEntry(
        id=1,
        model_id="doubao-pro",
        name="Doubao Pro",
        provider=ModelProvider.VOLCENGINE,
        endpoint_id_env="VOLCENGINE_MODEL_DOUBAO_PRO",
        system_prompt=ROLEPLAY_PROMPT,
        temperature=0.8,
    ),
    CatalogEntry(
        id=2,
        model_id="doubao-lite",
        name="Doubao Lite",
        provider=ModelProvider.VOLCENGINE,
        endpoint_id_env="VOLCENGINE_MODEL_DOUBAO_LITE",
        system_prompt=ROLEPLAY_PROMPT,
        temperature=0.8,
    ),
    CatalogEntry(
        id=3,
        model_id="gpt-4o-mini",
        name="GPT-4o mini",
        provider=ModelProvider.OPENAI,
        model="gpt-4o-mini",
        model_id_env="OPENAI_MODEL_ID",
        system_prompt=ASSISTANT_PROMPT,
        temperature=0.7,
    ),
    CatalogEntry(
        id=4,
        model_id="gpt-4o",
        name="GPT-4o",
        provider=ModelProvider.OPENAI,
        model="gpt-4o",
        system_prompt=ASSISTANT_PROMPT,
        temperature=0.7,
    ),
)
