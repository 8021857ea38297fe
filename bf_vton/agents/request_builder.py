"""Model Request Builder - assembles multimodal provider requests."""

from ..config import GeminiConfig, PromptConfig
from ..models import EncodedImage, ProviderPart, ProviderRequest
from ..models.size import size_options


class RequestBuilder:
    """Builds edit and size requests from prompt templates and model settings.

    Part order is fixed: images first (user, then product), instruction last.
    """

    def __init__(self, gemini: GeminiConfig, prompts: PromptConfig):
        self.gemini = gemini
        self.prompts = prompts

    def edit_instruction(self, label: str) -> str:
        return self.prompts.edit_instruction.format(product_label=label, sizes=size_options())

    def size_instruction(self, label: str) -> str:
        return self.prompts.size_instruction.format(product_label=label, sizes=size_options())

    def build_edit_request(
        self,
        user_image: EncodedImage,
        product_image: EncodedImage,
        label: str,
    ) -> ProviderRequest:
        """Request an edited photo of the user wearing the product.

        Args:
            user_image: Normalized photo of the user (first image)
            product_image: Normalized product photo (second image)
            label: Product name shown to the model

        Returns:
            ProviderRequest for the image model at minimal temperature
        """
        return ProviderRequest(
            model=self.gemini.image_model,
            parts=(
                ProviderPart(image=user_image),
                ProviderPart(image=product_image),
                ProviderPart(text=self.edit_instruction(label)),
            ),
            temperature=self.gemini.edit_temperature,
            response_modalities=tuple(self.gemini.image_response_modalities) or None,
        )

    def build_size_request(self, user_image: EncodedImage, label: str) -> ProviderRequest:
        """Request a single size code for the user and product."""
        return ProviderRequest(
            model=self.gemini.text_model,
            parts=(
                ProviderPart(image=user_image),
                ProviderPart(text=self.size_instruction(label)),
            ),
        )
