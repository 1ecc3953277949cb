import pathlib

import jinja2
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Dependency, Provider, ThreadSafeSingleton


def provide_llm_env(template_path: str, root_path: pathlib.Path) -> jinja2.Environment:
    """Provide Jinja2 environment for LLM prompt templates.

    Unlike HTML templates, prompts use no autoescape and strip block
    whitespace so that the rendered text reads as written.
    """
    import anatomyguard.lib.json

    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(root_path.joinpath(template_path)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.policies.update({
        "json.dumps_function": anatomyguard.lib.json.dumps,
    })
    return env


class TemplateContainer(DeclarativeContainer):
    config: Configuration = Configuration(strict=True)
    root: Dependency[pathlib.Path] = Dependency(instance_of=pathlib.Path)

    llm: Provider[jinja2.Environment] = ThreadSafeSingleton(provide_llm_env, config.llm_path, root)
