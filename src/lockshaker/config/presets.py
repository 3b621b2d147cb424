"""Built-in policy presets and effective-policy assembly.

The ``default`` preset is what runs when no ``[policy]`` section is
configured. ``@types`` packages are always forced dev-only. Its root-only
safe-dependant group never fires on its own, because a root dependant
blocks a package before safe dependants are consulted.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from lockshaker.config.models import PolicyConfig
from lockshaker.domain.policy import Policy, PolicyError, merge_policies


def _rx(regex: str) -> dict[str, str]:
    return {"regex": regex}


_DEFAULT = {
    "patterns": [
        {
            "safe_dependants": [_rx(r"^$")],  # root package only
            "packages": [_rx(r"node_modules/lockshaker")],
        },
    ],
    "force_patterns": [_rx(r"/@types")],
}

# Strapi v3 admin build tooling, only reachable through Strapi packages.
_STRAPI_PACKAGES = [
    # each matches multiple packages
    r"babel",
    r"buffetjs",
    r"fortawesome",
    r"fingerprintjs",
    r"react",
    r"webpack",
    r"redux",
    r"node_modules/markdown-it",
    r"node_modules/strapi-generate",
    # each matches one package
    *(
        rf"node_modules/{name}$"
        for name in (
            "autoprefixer",
            "bootstrap",
            "classnames",
            "cross-env",
            "codemirror",
            "cropperjs",
            "font-awesome",
            "formik",
            "history",
            "js-cookie",
            "html-loader",
            "css-loader",
            "file-loader",
            "style-loader",
            "url-loader",
            "immer",
            "immutable",
            "invariant",
            "moment",
            "mini-css-extract-plugin",
            "material-design-lite",
            "prop-types",
            "reselect",
            "strapi-helper-plugin",
            "styled-components",
            r"sanitize\.css",
            "sanitize-html",
            "draft-js",
            r"highlight\.js",
            "firebase",
            "firebaseui",
            # CLI-only
            "inquirer",
            "ora",
        )
    ),
]

_STRAPI = {
    "patterns": [
        {
            "safe_dependants": [_rx(r"/strapi")],
            "packages": [_rx(p) for p in _STRAPI_PACKAGES],
        },
    ],
}

PRESETS: dict[str, PolicyConfig] = {
    "default": PolicyConfig.model_validate(_DEFAULT),
    "strapi": PolicyConfig.model_validate(_STRAPI),
}


def get_preset(name: str) -> PolicyConfig:
    """Look up a built-in preset by name.

    Raises:
        PolicyError: No preset with that name exists.
    """
    try:
        return PRESETS[name]
    except KeyError:
        known = ", ".join(sorted(PRESETS))
        msg = f"Unknown preset {name!r} (available: {known})"
        raise PolicyError(msg) from None


def assemble_policy(
    config: PolicyConfig,
    *,
    explicit: bool,
    plugin_policies: Iterable[PolicyConfig] = (),
    extra_presets: Sequence[str] = (),
) -> Policy:
    """Build the effective policy from every configured source.

    Order: built-in defaults and plugin policies (only when *config* was not
    set explicitly, or asks to extend them), then *config* itself, then the
    named presets. Policies merge by concatenation.

    Raises:
        PolicyError: A regex does not compile or a preset is unknown.
    """
    layers: list[Policy] = []
    seen: set[str] = set()
    if not explicit or config.extend_defaults:
        layers.append(PRESETS["default"].to_policy())
        layers.extend(p.to_policy() for p in plugin_policies)
        seen.add("default")
    if explicit:
        layers.append(config.to_policy())

    for name in [*config.presets, *extra_presets]:
        if name in seen:
            continue
        seen.add(name)
        layers.append(get_preset(name).to_policy())

    return merge_policies(layers)
