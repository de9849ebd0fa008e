"""
Render de instrucciones Markdown a HTML seguro.

- El HTML crudo del usuario NO pasa: bloques y tags inline quedan como texto escapado.
- Todo link generado lleva rel="ugc" (contenido generado por usuarios).
- Función pura: sin red ni disco.

`markdown.Markdown` guarda estado entre conversiones, así que la configuración
compartida es solo la tupla de extensiones; cada llamada arma su instancia.
"""

from __future__ import annotations

import markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

REFERRAL_RELS = ("ugc",)


class ReferralLinksTreeprocessor(Treeprocessor):
    def __init__(self, md, rels):
        super().__init__(md)
        self.rels = tuple(rels)

    def run(self, root):
        for element in root.iter("a"):
            rels = element.get("rel", "").split()
            for rel in self.rels:
                if rel not in rels:
                    rels.append(rel)
            element.set("rel", " ".join(rels))


class SafeMarkdownExtension(Extension):
    """
    Deshabilita HTML crudo y marca los links con `rel`.
    """

    def __init__(self, **kwargs):
        self.config = {
            "rels": [list(REFERRAL_RELS), "Valores de rel para los links generados"],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md):
        md.preprocessors.deregister("html_block")
        md.inlinePatterns.deregister("html")
        # Después de 'inline' (20), que es donde se crean los <a>
        md.treeprocessors.register(
            ReferralLinksTreeprocessor(md, self.getConfig("rels")),
            "referral_links",
            5,
        )


# Configuración inmutable compartida por todo el proceso
PIPELINE = (SafeMarkdownExtension,)


def render_markdown(text: str) -> str:
    """
    Convierte Markdown a HTML.

    >>> render_markdown("This is a test.")
    '<p>This is a test.</p>\\n'
    """
    md = markdown.Markdown(extensions=[factory() for factory in PIPELINE], output_format="html")
    html = md.convert(text or "")
    return f"{html}\n" if html else ""
