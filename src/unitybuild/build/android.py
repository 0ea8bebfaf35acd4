"""Android build variants."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from unitybuild.build.model import (
    AppIdentity,
    BuildOptions,
    BuildParams,
    BuildPlatform,
    BuildTarget,
    ReportResult,
    ScriptingBackend,
    ToolchainConfig,
    UnityOutput,
)
from unitybuild.build.naming import generate_name
from unitybuild.build.pipeline import BuildPipeline
from unitybuild.core.errors import UnsupportedPlatformError
from unitybuild.core.log import logger


class AndroidBuild:
    """Drive one Android build through a pipeline.

    Each BuildPlatform has exactly one handler in ``variants``; build()
    refuses anything else. The toolchain object is mutated in place
    and left that way whatever the outcome.
    """

    def __init__(
        self,
        pipeline: BuildPipeline,
        toolchain: ToolchainConfig,
        identity: AppIdentity,
        extension: str = "apk",
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.pipeline = pipeline
        self.toolchain = toolchain
        self.identity = identity
        self.extension = extension
        self.clock = clock

    @property
    def variants(self) -> dict[BuildPlatform, Callable[[BuildParams], UnityOutput]]:
        return {
            BuildPlatform.ANDROID_DEVELOPMENT: self.development,
            BuildPlatform.ANDROID_RELEASE: self.release,
        }

    def build(self, variant: BuildPlatform, params: BuildParams) -> UnityOutput:
        """Build params with the handler for variant.

        Raises:
            UnsupportedPlatformError: If variant has no handler
        """
        try:
            handler = self.variants[variant]
        except (KeyError, TypeError):
            raise UnsupportedPlatformError(
                f"Unsupported build platform: {variant!r}"
            ) from None
        return handler(params)

    def development(self, params: BuildParams) -> UnityOutput:
        self.toolchain.development = True
        return self._build_core(params)

    def release(self, params: BuildParams) -> UnityOutput:
        return self._build_core(params)

    def _build_core(self, params: BuildParams) -> UnityOutput:
        self.toolchain.scripting_backend = ScriptingBackend.IL2CPP
        self.toolchain.active_build_target = BuildTarget.ANDROID

        name = generate_name(
            self.identity.version,
            self.identity.product_name,
            self.clock(),
            self.extension,
        )
        output_path = params.build_path / name
        logger.info(
            "Building player",
            platform=params.settings.platform.value,
            output=str(output_path),
            development=self.toolchain.development,
        )

        report = self.pipeline.build_player(
            params.scenes,
            output_path,
            BuildTarget.ANDROID,
            BuildOptions.NONE,
            self.toolchain,
        )
        exit_code = 0 if report.result is ReportResult.SUCCEEDED else 1
        if exit_code:
            logger.error("Build failed", result=report.result.value)

        return UnityOutput(
            platform=params.settings.platform,
            build_path=params.relative_output(name),
            exit_code=exit_code,
        )
