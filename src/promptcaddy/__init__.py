"""PromptCaddy - serve Markdown prompt templates over MCP and the command line.

Prompts live as Markdown files with YAML frontmatter. A stdio MCP server
exposes each prompt as a tool and reloads the collection whenever the
directory changes; the CLI lists and renders prompts directly.
"""

__version__ = "1.0.0"
