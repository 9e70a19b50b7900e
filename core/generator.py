import google.generativeai as genai
import openai
import logging

from config.app_config import GEMINI_API_KEY, GEMINI_MODEL, OPENAI_API_KEY, OPENAI_MODEL
from core.errors import ExternalServiceError


class TextGenerator:
    """
    Text-generation collaborator used by the analyzers and the report generator.
    Gemini is tried first; OpenAI is the fallback.
    """

    def __init__(self, gemini_api_key=None, openai_api_key=None, gemini_model=None, openai_model=None):
        # Initialize Gemini
        api_key = gemini_api_key or GEMINI_API_KEY
        self.gemini_model_name = gemini_model or GEMINI_MODEL

        if not api_key:
            logging.error("GEMINI_API_KEY or GOOGLE_API_KEY not found in environment variables.")
            self.model = None
        else:
            try:
                genai.configure(api_key=api_key)
                self.model = genai.GenerativeModel(self.gemini_model_name)
                logging.info("TextGenerator initialized successfully with Gemini API")
            except Exception as e:
                logging.error(f"Failed to initialize Gemini model: {e}")
                self.model = None

        # Initialize OpenAI (Fallback)
        self.openai_api_key = openai_api_key or OPENAI_API_KEY
        self.openai_model_name = openai_model or OPENAI_MODEL
        if self.openai_api_key:
            self.openai_client = openai.OpenAI(api_key=self.openai_api_key)
            logging.info("OpenAI fallback initialized successfully")
        else:
            self.openai_client = None
            logging.warning("OPENAI_API_KEY not found. ChatGPT fallback disabled.")

    @property
    def available(self) -> bool:
        return bool(self.model or self.openai_client)

    def generate(self, prompt: str, max_tokens: int = 800, temperature: float = 0.3, response_format: str = "json_object") -> str:
        """
        Generate text for a prompt.
        Raises ExternalServiceError when no model is configured or every model fails.
        """
        if not self.available:
            raise ExternalServiceError("No text-generation models initialized")

        # Try Gemini first
        if self.model:
            try:
                generation_config = {"max_output_tokens": max_tokens, "temperature": temperature}
                if response_format == "json_object":
                    generation_config["response_mime_type"] = "application/json"
                response = self.model.generate_content(prompt, generation_config=generation_config)
                return response.text.strip()
            except Exception as e:
                logging.error(f"Gemini generation failed: {e}")

        # Fallback to OpenAI
        if self.openai_client:
            try:
                logging.info("Generating with ChatGPT (fallback)...")
                kwargs = {}
                if response_format:
                    kwargs["response_format"] = {"type": response_format}
                response = self.openai_client.chat.completions.create(
                    model=self.openai_model_name,
                    messages=[{"role": "user", "content": prompt}],
                    max_tokens=max_tokens,
                    temperature=temperature,
                    **kwargs
                )
                return (response.choices[0].message.content or "").strip()
            except Exception as e:
                logging.error(f"ChatGPT generation failed: {e}")

        raise ExternalServiceError("All text-generation models failed")
