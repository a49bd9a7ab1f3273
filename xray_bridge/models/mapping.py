"""Model for the title to Xray test key lookup table."""

from pydantic import ConfigDict, RootModel


class TitleKeyMapping(RootModel[dict[str, str]]):
    """Maps human readable test titles to Xray test keys."""

    model_config = ConfigDict(frozen=True)

    def get(self, title: str) -> str | None:
        """Return the test key for a title, or None when unmapped."""
        return self.root.get(title)

    def __len__(self) -> int:
        return len(self.root)
