"""
iPXE boot script generator for mass server deployment.

This module renders the network-boot script offered for download by the
boot script endpoint. Rendering is pure: the only input that is not a
parameter is the generation timestamp, and callers may pin that as well.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, List, Optional

from ..config.settings import BootScriptConfig
from ..exceptions import InvalidServerCountError, ValidationError

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class BootScriptGenerator:
    """Generates iPXE boot scripts for a named cluster."""

    def __init__(self, config: Optional[BootScriptConfig] = None):
        """
        Initialize boot script generator.

        Args:
            config: Script defaults (image URLs, kernel parameters, menu timing)
        """
        self.config = config or BootScriptConfig()

    def generate(
        self,
        cluster_name: str,
        server_count: int,
        boot_image: Optional[str] = None,
        kernel_params: Optional[str] = None,
        generated_at: Optional[datetime] = None
    ) -> str:
        """
        Render the boot script for a cluster.

        Args:
            cluster_name: Cluster name, used in the menu and node hostnames
            server_count: Number of per-server stanzas to emit
            boot_image: Kernel image URL (configured default when omitted)
            kernel_params: Kernel command line (configured default when omitted)
            generated_at: Timestamp written into the header (now when omitted)

        Returns:
            The script text

        Raises:
            InvalidServerCountError: If server_count is not a usable positive integer
            ValidationError: If a text parameter spans several lines
        """
        count = self.validate_server_count(server_count)
        for field, value in (("clusterName", cluster_name),
                             ("bootImage", boot_image),
                             ("kernelParams", kernel_params)):
            self._check_single_line(field, value)

        image = boot_image or self.config.boot_image
        params = kernel_params or self.config.kernel_params
        timestamp = self._format_timestamp(generated_at or datetime.now(timezone.utc))

        sections = [
            self._generate_header(cluster_name, count, timestamp),
            self._generate_banner(cluster_name, count),
            self._generate_network(),
            self._generate_menu(cluster_name, count),
            self._generate_deploy(cluster_name, count, image, params),
            self._generate_tail(),
        ]

        logger.debug(f"Generated boot script for cluster '{cluster_name}' with {count} servers")
        return "".join(sections)

    def suggested_filename(self, cluster_name: str) -> str:
        """Download filename for a cluster's script."""
        safe_name = _UNSAFE_FILENAME_CHARS.sub("_", cluster_name) or "cluster"
        return f"{safe_name}-boot.{self.config.file_extension}"

    def validate_server_count(self, server_count: Any) -> int:
        """Return server_count as an int or raise InvalidServerCountError."""
        maximum = self.config.max_server_count
        if isinstance(server_count, bool) or not isinstance(server_count, int):
            raise InvalidServerCountError(server_count, maximum)
        if not 1 <= server_count <= maximum:
            raise InvalidServerCountError(server_count, maximum)
        return server_count

    @staticmethod
    def _check_single_line(field: str, value: Optional[str]) -> None:
        if value is not None and ("\n" in value or "\r" in value):
            raise ValidationError(field, value, "must not contain line breaks")

    @staticmethod
    def _format_timestamp(moment: datetime) -> str:
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        moment = moment.astimezone(timezone.utc)
        return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def _generate_header(self, cluster_name: str, count: int, timestamp: str) -> str:
        return (
            "#!ipxe\n"
            "#\n"
            f"# iPXE Boot Configuration for {cluster_name}\n"
            f"# Generated: {timestamp}\n"
            f"# Servers: {count}\n"
            "#\n"
            "\n"
        )

    def _generate_banner(self, cluster_name: str, count: int) -> str:
        rule = "=" * 40
        return (
            f"echo {rule}\n"
            f"echo  {self.config.banner_title}\n"
            f"echo  Cluster: {cluster_name}\n"
            f"echo  Server Count: {count}\n"
            f"echo {rule}\n"
            "echo\n"
            "\n"
        )

    def _generate_network(self) -> str:
        return (
            "# Network configuration\n"
            "dhcp || echo DHCP failed, trying static...\n"
            "\n"
        )

    def _generate_menu(self, cluster_name: str, count: int) -> str:
        return (
            "# Boot menu\n"
            ":start\n"
            f"menu iPXE Boot Menu - {cluster_name}\n"
            f"item --key 1 deploy Deploy {count} Servers\n"
            "item --key 2 shell  iPXE Shell\n"
            "item --key 3 reboot Reboot\n"
            f"choose --default deploy --timeout {self.config.menu_timeout_ms} target && goto ${{target}}\n"
            "\n"
        )

    def _generate_deploy(self, cluster_name: str, count: int, image: str, params: str) -> str:
        lines: List[str] = [
            ":deploy\n",
            f"echo Deploying {count} servers for {cluster_name}...\n",
        ]

        for index in range(1, count + 1):
            lines.append(
                "\n"
                f"# Server {index} configuration\n"
                f"echo Configuring server {index}/{count}...\n"
                f"set server-{index}-hostname {cluster_name}-node-{index}\n"
            )

        lines.append(
            "\n"
            "# Boot kernel\n"
            "echo Loading kernel and initrd...\n"
            f"kernel {image} {params} cluster={cluster_name} nodes={count}\n"
            f"initrd {self.config.initrd_image}\n"
            "boot || goto failed\n"
            "\n"
        )
        return "".join(lines)

    def _generate_tail(self) -> str:
        delay = self.config.reboot_delay_seconds
        return (
            ":shell\n"
            "echo Entering iPXE shell...\n"
            "shell\n"
            "\n"
            ":failed\n"
            "echo Boot failed! Press any key to return to menu...\n"
            "prompt\n"
            "goto start\n"
            "\n"
            ":reboot\n"
            f"echo Rebooting in {delay} seconds...\n"
            f"sleep {delay}\n"
            "reboot\n"
        )
