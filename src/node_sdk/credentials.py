"""
Credential definitions.

A credential type declares the properties the host renders in its
credential form and how to test stored values against the remote service.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class BaseCredential:
    """Base class for credential types"""

    name: str = ""
    display_name: str = ""
    documentation_url: Optional[str] = None
    properties: List[Dict[str, Any]] = []

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self.data: Dict[str, Any] = data or {}

    def validate(self) -> Dict[str, Any]:
        """
        Check that every required property has a value.

        Returns:
            {"valid": bool, "message": str}
        """
        missing = [
            prop["name"]
            for prop in self.properties
            if prop.get("required") and not self.data.get(prop["name"])
        ]
        if missing:
            return {
                "valid": False,
                "message": f"Missing required fields: {', '.join(missing)}",
            }
        return {"valid": True, "message": "OK"}

    def test(self) -> Dict[str, Any]:
        """Test the credential against the service. Never raises."""
        raise NotImplementedError

    @classmethod
    def get_definition(cls) -> Dict[str, Any]:
        return {
            "name": cls.name,
            "displayName": cls.display_name,
            "documentationUrl": cls.documentation_url,
            "properties": cls.properties,
        }
