"""
Alt text generation for one or more images.

AltTextGenerator sends every image of a batch to the vision model at the same
time and reassembles the answers in the order the images were given.
"""

import asyncio
import logging
from dataclasses import dataclass
from operator import attrgetter

from config import API_SETTINGS, CREDENTIAL_SETTINGS, MODELS
from credential_store import EnvFileCredentialStore
from errors import AltTextError, EmptyBatchError, ImageLoadError, MissingCredentialError, with_position
from image_processing import prepare_image
from prompts import GenerationConfig, prompt_for
from vision_api import create_client, request_alt_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageAsset:
    index: int
    source: object


@dataclass(frozen=True)
class GenerationResult:
    """Outcome for one image: alt_text on success, error on failure."""

    index: int
    alt_text: str = None
    error: AltTextError = None

    @property
    def ok(self):
        return self.error is None


def combine_alt_texts(texts):
    """
    Join per-image alt texts into the text shown to the user.

    A single text is returned as is; several are labelled "Image N:" and
    separated by a blank line.
    """
    if len(texts) == 1:
        return texts[0]
    return "\n\n".join(f"Image {i}: {text}" for i, text in enumerate(texts, 1))


class AltTextGenerator:
    def __init__(
        self,
        credential_store=None,
        http_client=None,
        model=MODELS["alt_text"],
        timeout=API_SETTINGS["timeout"],
        base_url=API_SETTINGS["base_url"],
        key_name=CREDENTIAL_SETTINGS["key_name"],
    ):
        """
        Args:
            credential_store (CredentialStore): Where the API key is read from
            http_client (httpx.AsyncClient): Optional client, e.g. with a mock transport.
                Left open; the caller owns it.
            model (str): Vision model name
            timeout (float): Per-request timeout in seconds
            base_url (str): API root
            key_name (str): Name of the API key in the credential store
        """
        self.credential_store = credential_store or EnvFileCredentialStore()
        self.http_client = http_client
        self.model = model
        self.timeout = timeout
        self.base_url = base_url
        self.key_name = key_name

    def _read_api_key(self):
        api_key = self.credential_store.get(self.key_name)
        if not api_key or not api_key.strip():
            raise MissingCredentialError(self.key_name)
        return api_key.strip()

    async def _generate_for(self, client, asset, prompt_spec, total):
        try:
            encoded_image = await prepare_image(asset.source)
            alt_text = await request_alt_text(client, encoded_image, prompt_spec, self.model)
        except AltTextError as e:
            if isinstance(e, ImageLoadError):
                e.index = asset.index
            logger.warning("Image %d/%d failed: %s", asset.index + 1, total, e)
            return GenerationResult(asset.index, error=with_position(e, asset.index, total))

        logger.debug("Image %d/%d done", asset.index + 1, total)
        return GenerationResult(asset.index, alt_text=alt_text)

    async def generate_results(self, images, config=None):
        """
        Describe every image and return one result per image, in input order.

        Failures are reported in the matching result instead of being raised,
        except for problems that stop the whole batch before any request.

        Args:
            images: Sequence of image sources (bytes, paths, file objects, PIL images)
            config (GenerationConfig): Detail and focus levels shared by the batch

        Returns:
            list[GenerationResult]: Sorted by index

        Raises:
            EmptyBatchError: If no images were given
            MissingCredentialError: If no API key is stored
        """
        images = list(images)
        if not images:
            raise EmptyBatchError()
        api_key = self._read_api_key()

        prompt_spec = prompt_for(config or GenerationConfig())
        assets = [ImageAsset(index, source) for index, source in enumerate(images)]
        total = len(assets)
        logger.info("Generating alt text for %d image(s)", total)

        client = create_client(api_key, self.http_client, self.timeout, self.base_url)
        try:
            tasks = [
                asyncio.create_task(self._generate_for(client, asset, prompt_spec, total))
                for asset in assets
            ]
            results = []
            try:
                for finished in asyncio.as_completed(tasks):
                    results.append(await finished)
            except BaseException:
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        finally:
            if self.http_client is None:
                await client.close()

        results.sort(key=attrgetter("index"))
        return results

    async def generate(self, images, config=None):
        """
        Describe every image and combine the texts.

        If any image fails, its error is raised (lowest position first) and no
        text is returned.

        Returns:
            str: Combined alt text, see combine_alt_texts()
        """
        results = await self.generate_results(images, config)
        for result in results:
            if not result.ok:
                raise result.error
        return combine_alt_texts([result.alt_text for result in results])

    async def generate_one(self, image, config=None):
        return await self.generate([image], config)


def generate_alt_text(images, config=None, **generator_options):
    """
    Blocking wrapper around AltTextGenerator.generate().

    Args:
        images: Sequence of image sources
        config (GenerationConfig): Detail and focus levels
        **generator_options: Passed to AltTextGenerator

    Returns:
        str: Combined alt text
    """
    generator = AltTextGenerator(**generator_options)
    return asyncio.run(generator.generate(images, config))
