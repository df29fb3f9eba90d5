"""SharePoint utilities namespace: sending e-mail."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .utils import RequestConfig, get_prior_endpoint, trim_multiline


@dataclass
class EmailProps:
    """Options of an e-mail to send."""

    subject: str = ""
    body: str = ""
    to: List[str] = field(default_factory=list)
    cc: List[str] = field(default_factory=list)
    bcc: List[str] = field(default_factory=list)
    from_address: str = ""


class Utility:
    """Utilities API endpoint."""

    def __init__(self, client: Any, endpoint: str, config: Optional[RequestConfig] = None) -> None:
        self.client = client
        self.endpoint = endpoint
        self.config = config

    def send_email(self, options: EmailProps) -> None:
        """Send an e-mail as described by ``options``."""
        endpoint = (
            get_prior_endpoint(self.endpoint, "/_api") + "/_api/SP.Utilities.Utility.SendEmail"
        )
        properties: Dict[str, Any] = {
            "__metadata": {"type": "SP.Utilities.EmailProperties"},
            "Subject": options.subject,
            "Body": options.body,
        }
        if options.from_address:
            properties["From"] = options.from_address
        if options.to:
            properties["To"] = {"results": list(options.to)}
        if options.cc:
            properties["CC"] = {"results": list(options.cc)}
        if options.bcc:
            properties["BCC"] = {"results": list(options.bcc)}
        props = json.dumps(properties, ensure_ascii=False, separators=(",", ":"), sort_keys=True)
        body = trim_multiline('{ "properties": ' + props + "}").encode("utf-8")
        self.client.post(endpoint, body, self.config)