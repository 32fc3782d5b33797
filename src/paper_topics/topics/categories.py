"""Topic categories a paper can be classified into."""

from __future__ import annotations

from enum import Enum


class UnknownCategoryError(ValueError):
    """Raised when a caller passes a value that is not a TopicCategory."""


class TopicCategory(str, Enum):
    AGENTIC_CODING = "agentic-coding"
    IMAGE_GENERATION = "image-generation"
    VIDEO_GENERATION = "video-generation"
    AI_CONTENT_CREATORS = "ai-content-creators"
    COMFYUI = "comfyui"
    RUNPOD = "runpod"
    MARKET_OPPORTUNITY = "market-opportunity"
    NLP = "nlp"
    LLM = "llm"
    RAG = "rag"
    MULTIMODAL = "multimodal"
    ROBOTICS = "robotics"
    RL = "rl"
    TRANSFORMERS = "transformers"
    SAFETY = "safety"
    SCIENCE = "science"
    EFFICIENCY = "efficiency"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]

    @property
    def description(self) -> str:
        return CATEGORY_DESCRIPTIONS[self]

    @classmethod
    def parse(cls, value: TopicCategory | str) -> TopicCategory:
        """Coerce a category slug (case-insensitive) to a TopicCategory.

        Raises:
            UnknownCategoryError: If the value is not a supported category.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        valid = ", ".join(c.value for c in cls)
        raise UnknownCategoryError(f"Unknown topic category: {value!r}. Valid: {valid}")


CATEGORY_LABELS = {
    TopicCategory.AGENTIC_CODING: "Agentic Coding",
    TopicCategory.IMAGE_GENERATION: "Image Generation",
    TopicCategory.VIDEO_GENERATION: "Video Generation",
    TopicCategory.AI_CONTENT_CREATORS: "AI Content Creators",
    TopicCategory.COMFYUI: "ComfyUI",
    TopicCategory.RUNPOD: "RunPod/Deployment",
    TopicCategory.MARKET_OPPORTUNITY: "Market Opportunity",
    TopicCategory.NLP: "NLP & Language",
    TopicCategory.LLM: "Large Language Models",
    TopicCategory.RAG: "RAG & Retrieval",
    TopicCategory.MULTIMODAL: "Multimodal AI",
    TopicCategory.ROBOTICS: "Robotics & Embodied AI",
    TopicCategory.RL: "Reinforcement Learning",
    TopicCategory.TRANSFORMERS: "Transformers & Architectures",
    TopicCategory.SAFETY: "AI Safety & Alignment",
    TopicCategory.SCIENCE: "AI for Science",
    TopicCategory.EFFICIENCY: "Efficient AI",
    TopicCategory.OTHER: "Other",
}

CATEGORY_DESCRIPTIONS = {
    TopicCategory.AGENTIC_CODING: "AI agents, tool use, autonomous coding assistants",
    TopicCategory.IMAGE_GENERATION: "Diffusion models, text-to-image, LoRA, ControlNet",
    TopicCategory.VIDEO_GENERATION: "Text-to-video, video synthesis, temporal consistency",
    TopicCategory.AI_CONTENT_CREATORS: "Voice cloning, music gen, avatars, digital humans",
    TopicCategory.COMFYUI: "Node-based workflows, custom nodes, pipelines",
    TopicCategory.RUNPOD: "GPU inference, quantization, model serving, deployment",
    TopicCategory.MARKET_OPPORTUNITY: "Commercial potential, efficient methods, practical applications",
    TopicCategory.NLP: "NLP, text classification, translation, summarization",
    TopicCategory.LLM: "Foundation models, pretraining, instruction tuning, RLHF",
    TopicCategory.RAG: "Retrieval-augmented generation, vector search, embeddings",
    TopicCategory.MULTIMODAL: "Vision-language models, cross-modal learning",
    TopicCategory.ROBOTICS: "Robot learning, manipulation, navigation, embodied AI",
    TopicCategory.RL: "RL algorithms, policy learning, decision making",
    TopicCategory.TRANSFORMERS: "Model architectures, attention mechanisms, efficiency",
    TopicCategory.SAFETY: "Alignment, interpretability, red-teaming, guardrails",
    TopicCategory.SCIENCE: "Drug discovery, protein folding, climate, materials",
    TopicCategory.EFFICIENCY: "Quantization, pruning, distillation, on-device ML",
    TopicCategory.OTHER: "Other AI/ML papers",
}

# Scoring and display order. Ties in relevance keep this order.
CATEGORY_PRIORITY: tuple[TopicCategory, ...] = (
    TopicCategory.LLM,
    TopicCategory.AGENTIC_CODING,
    TopicCategory.RAG,
    TopicCategory.MULTIMODAL,
    TopicCategory.IMAGE_GENERATION,
    TopicCategory.VIDEO_GENERATION,
    TopicCategory.AI_CONTENT_CREATORS,
    TopicCategory.NLP,
    TopicCategory.TRANSFORMERS,
    TopicCategory.RL,
    TopicCategory.ROBOTICS,
    TopicCategory.SAFETY,
    TopicCategory.EFFICIENCY,
    TopicCategory.SCIENCE,
    TopicCategory.COMFYUI,
    TopicCategory.RUNPOD,
    TopicCategory.MARKET_OPPORTUNITY,
    TopicCategory.OTHER,
)

SCORED_CATEGORIES: tuple[TopicCategory, ...] = tuple(
    c for c in CATEGORY_PRIORITY if c is not TopicCategory.OTHER
)
