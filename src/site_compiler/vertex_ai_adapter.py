from __future__ import annotations

import json
import logging
from typing import Any, Sequence

import vertexai
from pydantic import ValidationError
from vertexai.generative_models import GenerationConfig, GenerativeModel

from .errors import ConfigGenerationError, EditMutationError
from .models.config import UploadedAsset, WebsiteConfig
from .models.edit import EditClassification
from .normalize import normalize_config

logger = logging.getLogger(__name__)

CONFIG_SYSTEM_PROMPT = """You are a web design consultant. Given a user's description of the website they want, you produce a JSON configuration object. Output ONLY valid JSON: no markdown, no explanation, no code fences.

The JSON must follow this schema:

{
  "version": 1,
  "templateId": "restaurant" | "ecommerce" | "saas" | "portfolio" | "blog" | "fitness",
  "business": {"name", "tagline", "description", "phone"?, "email"?, "address"?, "hours"?},
  "theme": {"primary", "secondary", "accent": <tailwind-color>, "background": "light" | "dark",
            "fontStyle": "modern" | "serif" | "playful" | "minimal"},
  "nav": {"items": [{"label", "href"}], "ctaButton"?: {"label", "href"}},
  "hero": {"variant": "centered" | "split-left" | "split-right" | "fullscreen" | "minimal" | "gradient-animated" | "video-bg",
           "headline", "subheadline", "ctaText", "ctaHref", "secondaryCta"?: {"text", "href"},
           "imageDescription": "20-40 words, vivid description for image generation"},
  "sections": [ ...section objects... ],
  "footer": {"variant": "simple" | "multi-column" | "minimal", "columns"?: [{"title", "links": [{"label", "href"}]}],
             "copyright", "socialLinks"?: [{"platform", "url"}]},
  "pages": [{"path": "/about", "title": "About", "sections": [ ...section objects... ]}]
}

TAILWIND COLORS (use ONLY these): slate, gray, zinc, neutral, stone, red, orange, amber, yellow, lime, green, emerald, teal, cyan, sky, blue, indigo, violet, purple, fuchsia, pink, rose

SECTION TYPES (every section object has "type" and "variant" plus type-specific data):

1. feature-grid (cards, icons-left, icons-top, alternating): title, items: [{icon, title, description}]
2. menu (tabbed, grid, list, elegant): title, categories: [{name, items: [{name, description, price}]}]
3. product-grid (grid, list, carousel, featured): title, items: [{name, price, description, imageDescription, originalPrice?, badge?}]
4. testimonials (cards, single-spotlight, slider, minimal): title, items: [{name, role, quote, rating?}]
5. pricing (columns, toggle, comparison-table): title, tiers: [{name, price, period?, description, features: [string], highlighted?, ctaText}]
6. gallery (grid, masonry, carousel): title, items: [{imageDescription, caption?}]
7. stats (inline, cards, large-numbers): items: [{value, label}]
8. cta-banner (gradient, solid, with-image): headline, description, ctaText, ctaHref, imageDescription?
9. team (grid, carousel, detailed): title, members: [{name, role, bio?, imageDescription}]
10. blog-preview (cards, list, featured-hero): title, posts: [{title, excerpt, date, author, imageDescription, category?}]
11. contact (form-only, split-with-info, minimal): title
12. faq (accordion, two-column, simple): title, items: [{question, answer}]
13. about (text-image, timeline, values-grid): title, content, imageDescription?, timeline?: [{year, title, description}], values?: [{title, description, icon}]
14. logo-cloud (scroll, grid, simple): items: [{name}]
15. newsletter (centered, split, banner): title, subtitle?, benefits?: [string]
16. process (numbered, timeline, cards): steps: [{title, description, icon?}]
17. custom (custom): componentName (PascalCase), code (complete React/TSX component with a default export, under 80 lines)

RULES:
1. templateId MUST be one of: restaurant, ecommerce, saas, portfolio, blog, fitness
2. Include 4-8 sections on the homepage and 2-4 sub-pages with 1-3 sections each
3. Write real, specific content, not generic placeholders
4. MAXIMUM 6 imageDescription fields across the entire config
5. Restaurant sites must have a menu section; e-commerce sites a product-grid section
6. Use "custom" sections ONLY when no other section type fits"""

CLASSIFY_PROMPT = """You are an edit classifier for a website builder.

CURRENT WEBSITE:
- Template: {template_id}
- Business: {business}
- Theme: {background} with {primary} primary color
- Sections: {sections}

USER EDIT REQUEST: "{edit_text}"

Classify this edit into ONE of these types:

1. "logo-only" - ONLY changing the logo/brand image
2. "styling" - Colors, fonts, theme changes
3. "content" - Text, headlines, descriptions
4. "structure-minor" - Add/remove/reorder 1-2 sections
5. "structure-major" - Complete redesign or template change
6. "images" - Non-logo images
7. "contact-info" - Phone, email, address
8. "navigation" - Menu links

Respond ONLY with valid JSON:
{{
  "type": "<edit-type>",
  "scope": "narrow" | "moderate" | "wide",
  "shouldRegenerate": true/false,
  "targetFields": ["business.logoUrl", ...],
  "reasoning": "brief explanation"
}}

RULES:
- Changing template type or completely redesigning: structure-major + shouldRegenerate=true
- Only the logo: logo-only + targetFields=["business.logoUrl"]
- 3+ major changes: structure-major + shouldRegenerate=true
- Adding/removing many sections: structure-major + shouldRegenerate=true"""

MUTATE_PROMPT = """You are editing a website configuration. Make ONLY the requested change.

CURRENT CONFIG:
{config}

USER REQUEST: "{edit_text}"

EDIT TYPE: {edit_type}
TARGET FIELDS: {target_fields}

RULES:
1. ONLY modify fields in TARGET FIELDS
2. If changing the logo, ONLY change business.logoUrl, never image descriptions
3. If changing theme colors, ONLY change theme.primary/secondary/accent
4. If changing content, ONLY change text fields
5. Keep ALL sections, pages and structure identical unless the request changes structure
6. Do NOT rewrite image descriptions unless the user explicitly asks
7. Preserve every variant

Return the COMPLETE updated config with MINIMAL changes."""


class VertexAIAdapter:
    """Adapter for Vertex AI Gemini models."""

    def __init__(
        self,
        *,
        project_id: str,
        location: str = "us-central1",
        model_name: str = "gemini-1.5-pro",
        model: Any | None = None,
    ) -> None:
        """Initialize Vertex AI adapter.

        Args:
            project_id: GCP project ID
            location: Vertex AI location
            model_name: Model name (e.g., "gemini-1.5-pro")
            model: Preconstructed model, mainly for tests
        """
        self.project_id = project_id
        self.location = location
        self.model_name = model_name

        if model is None:
            vertexai.init(project=project_id, location=location)
            model = GenerativeModel(model_name)
        self.model = model

    def generate_content(
        self,
        prompt: str,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 8192,
        response_format: str | None = None,
    ) -> str:
        """Generate content using Vertex AI.

        Args:
            prompt: Input prompt
            temperature: Sampling temperature (0.0 - 1.0)
            max_output_tokens: Maximum output tokens
            response_format: Optional response format ("json" for JSON mode)

        Returns:
            Generated text
        """
        if response_format == "json":
            generation_config = GenerationConfig(
                temperature=temperature,
                max_output_tokens=max_output_tokens,
                response_mime_type="application/json",
            )
            prompt = f"{prompt}\n\nPlease respond with valid JSON only."
        else:
            generation_config = GenerationConfig(
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            )

        response = self.model.generate_content(
            prompt,
            generation_config=generation_config,
        )

        generated_text = response.text

        logger.info(
            "Generated content with Vertex AI",
            extra={
                "model": self.model_name,
                "temperature": temperature,
                "input_length": len(prompt),
                "output_length": len(generated_text),
            },
        )

        return generated_text

    def generate_json(
        self,
        prompt: str,
        *,
        temperature: float = 0.7,
        max_output_tokens: int = 8192,
    ) -> Any:
        """Generate structured JSON response.

        Raises:
            ValueError: The response is not valid JSON
        """
        response = self.generate_content(
            prompt,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            response_format="json",
        )

        response = response.strip()
        if response.startswith("```json"):
            response = response[7:]
        if response.startswith("```"):
            response = response[3:]
        if response.endswith("```"):
            response = response[:-3]

        try:
            return json.loads(response.strip())
        except json.JSONDecodeError as exc:
            logger.error(
                "Failed to parse JSON response",
                exc_info=True,
                extra={"response": response[:500]},
            )
            raise ValueError(f"Invalid JSON response: {exc}") from exc

    def generate_config(
        self,
        prompt: str,
        images: Sequence[UploadedAsset] | None = None,
    ) -> WebsiteConfig:
        """Generate a website config for a free-text description.

        Args:
            prompt: What the user wants the site to be
            images: Images the user uploaded with the request

        Returns:
            A normalized config

        Raises:
            ConfigGenerationError: The model output cannot be turned into a config
        """
        user_prompt = f"Create a website configuration for: {prompt}"
        assets = list(images or [])
        if assets:
            user_prompt += f"\n\nThe user has uploaded {len(assets)} image(s). Reference these in the design."

        try:
            raw = self.generate_json(
                f"{CONFIG_SYSTEM_PROMPT}\n\n{user_prompt}",
                temperature=0.8,
                max_output_tokens=16384,
            )
        except ValueError as exc:
            raise ConfigGenerationError(str(exc)) from exc

        config = normalize_config(raw)

        logo = next((asset for asset in assets if "logo" in asset.name.lower()), None)
        if logo is not None:
            business = config.business.model_copy(update={"logo_url": logo.url})
            config = config.model_copy(update={"business": business})
        return config

    def classify_edit(self, edit_text: str, config: WebsiteConfig) -> EditClassification:
        """Classify an edit; output that cannot be read becomes a regenerate classification."""
        prompt = CLASSIFY_PROMPT.format(
            template_id=config.template_id,
            business=config.business.name,
            background=config.theme.background,
            primary=config.theme.primary,
            sections=", ".join(str(section.type) for section in config.sections),
            edit_text=edit_text,
        )
        try:
            raw = self.generate_json(prompt, temperature=0.3, max_output_tokens=1024)
            if not isinstance(raw, dict):
                raise ValueError(f"expected an object, got {type(raw).__name__}")
            classification = EditClassification.model_validate(raw)
        except ValueError as exc:
            # pydantic's ValidationError is a ValueError too
            logger.warning(
                "Unreadable edit classification; regenerating",
                extra={"error": str(exc)[:500]},
            )
            return EditClassification.ambiguous("classifier output could not be parsed")

        logger.info(
            "Classified edit with Vertex AI",
            extra={
                "edit_type": classification.type,
                "scope": classification.scope,
                "should_regenerate": classification.should_regenerate,
                "target_fields": list(classification.target_fields),
            },
        )
        return classification

    def mutate_config(
        self,
        config: WebsiteConfig,
        edit_text: str,
        classification: EditClassification,
    ) -> WebsiteConfig:
        """Ask the model for the full config with the edit applied.

        Raises:
            EditMutationError: The response is not a valid config
        """
        prompt = MUTATE_PROMPT.format(
            config=json.dumps(config.to_ir(), ensure_ascii=False, indent=2),
            edit_text=edit_text,
            edit_type=classification.type,
            target_fields=", ".join(classification.target_fields),
        )
        try:
            raw = self.generate_json(prompt, temperature=0.3, max_output_tokens=16384)
            return WebsiteConfig.model_validate(raw)
        except ValidationError as exc:
            raise EditMutationError(f"mutated config is invalid: {exc.error_count()} errors") from exc
        except ValueError as exc:
            raise EditMutationError(str(exc)) from exc


__all__ = ["VertexAIAdapter", "CONFIG_SYSTEM_PROMPT", "CLASSIFY_PROMPT", "MUTATE_PROMPT"]
