"""Base prompt class."""

from typing import Any


class Prompt:
    """Base class for all prompts."""

    def __init__(self, template: str, system_prompt: str = "", temperature: float = 0.7, max_tokens: int = 2048):
        """Initialize the prompt.

        Args:
            template: The prompt template string
            system_prompt: Instructions prepended to the formatted template
            temperature: Sampling temperature the prompt was tuned for
            max_tokens: Output budget the prompt was tuned for
        """
        self.template = template
        self.system_prompt = system_prompt
        self.temperature = temperature
        self.max_tokens = max_tokens

    def format(self, **kwargs: Any) -> str:
        """Format the prompt template with variables.

        Args:
            **kwargs: Variables to format the template with

        Returns:
            str: The formatted prompt, preceded by the system prompt when set
        """
        body = self.template.format(**kwargs)
        if self.system_prompt:
            return f"{self.system_prompt}\n\n{body}"
        return body
