"""
Built-in catalog — what a default zsh bootstrap installs and configures.

Package names are keyed by package-manager name; ``"*"`` covers every
manager that has no entry of its own.
"""

from __future__ import annotations

from collections.abc import Callable

from shellstrap.core.models.capability import AppendBlockEdit, Capability, PluginSpec

# ── Capabilities ────────────────────────────────────────────────

ZSH = Capability(name="zsh", packages={"*": ["zsh"]}, mandatory=True)
GIT = Capability(name="git", packages={"*": ["git"]}, mandatory=True)

# Either tool can download the framework installer; curl is what gets installed
DOWNLOADER = Capability(
    name="curl",
    executables=["curl", "wget"],
    packages={"*": ["curl"]},
    mandatory=True,
)

MANDATORY_CAPABILITIES: tuple[Capability, ...] = (ZSH, GIT, DOWNLOADER)

FZF = Capability(name="fzf", packages={"*": ["fzf"]})
AUTOJUMP = Capability(name="autojump", packages={"*": ["autojump"]})
DIRENV = Capability(name="direnv", packages={"*": ["direnv"]})

OPTIONAL_TOOLS: tuple[Capability, ...] = (FZF, AUTOJUMP, DIRENV)

COMMAND_NOT_FOUND = Capability(
    name="command-not-found",
    executables=["pkgfile"],
    paths=[
        "/usr/lib/command-not-found",
        "/usr/libexec/pk-command-not-found",
        "/usr/bin/command-not-found",
    ],
    packages={
        "apt": ["command-not-found"],
        "apt-get": ["command-not-found"],
        "dnf": ["PackageKit-command-not-found"],
        "yum": ["PackageKit-command-not-found"],
        "pacman": ["pkgfile"],
        "zypper": ["command-not-found"],
    },
)

# ── Plugins ─────────────────────────────────────────────────────

DEFAULT_PLUGINS: tuple[PluginSpec, ...] = (
    PluginSpec(name="zsh-z", source="https://github.com/agkozak/zsh-z.git"),
    PluginSpec(name="zsh-autosuggestions",
               source="https://github.com/zsh-users/zsh-autosuggestions.git"),
    PluginSpec(name="zsh-syntax-highlighting",
               source="https://github.com/zsh-users/zsh-syntax-highlighting.git"),
    PluginSpec(name="zsh-history-substring-search",
               source="https://github.com/zsh-users/zsh-history-substring-search.git"),
)

# Bundled with the framework; no dependencies
BUILTIN_PLUGINS: tuple[str, ...] = ("colored-man-pages", "sudo")

# Enabled only when the tool is on PATH
TOOL_PLUGINS: tuple[str, ...] = ("docker", "kubectl", "terraform")

# ── Configuration blocks ────────────────────────────────────────

HISTORY = AppendBlockEdit(name="history", block="""\
# History configuration
export HISTSIZE=100000
export SAVEHIST=100000
export HISTFILE=~/.zsh_history
setopt HIST_IGNORE_ALL_DUPS
setopt HIST_FIND_NO_DUPS
setopt HIST_IGNORE_SPACE
setopt SHARE_HISTORY""")

DIRECTORY_NAVIGATION = AppendBlockEdit(name="directory-navigation", block="""\
# Directory navigation
setopt AUTO_CD
setopt AUTO_PUSHD
setopt PUSHD_IGNORE_DUPS
setopt PUSHD_SILENT""")

HISTORY_SEARCH_KEYS = AppendBlockEdit(name="history-search-keys", block="""\
# Key bindings for history-substring-search
bindkey "^[[A" history-substring-search-up
bindkey "^[[B" history-substring-search-down""")

ALIASES = AppendBlockEdit(name="aliases", block="""\
# Useful aliases
alias ll="ls -la"
alias la="ls -a"
alias l="ls -l"
alias ..="cd .."
alias ...="cd ../.."
alias grep="grep --color=auto"
alias df="df -h"
alias du="du -h"
alias free="free -h"
alias mkdir="mkdir -p"
alias http-serve="python3 -m http.server"
alias ip-pub="curl -s https://ipinfo.io/ip || wget -qO- https://ipinfo.io/ip"
alias ports="netstat -tulpn | grep LISTEN\"""")

GIT_ALIASES = AppendBlockEdit(name="git-aliases", block="""\
# Git aliases
alias gs="git status"
alias ga="git add"
alias gc="git commit"
alias gco="git checkout"
alias gl="git log --oneline --graph --decorate --all"
alias gf="git fetch"
alias gp="git pull"
alias gpush="git push\"""")

DOCKER_ALIASES = AppendBlockEdit(name="docker-aliases", block="""\
# Docker aliases
alias dc="docker compose"
alias dps="docker ps"
alias di="docker images"
alias dex="docker exec -it"
alias dlog="docker logs -f\"""")

KUBECTL_ALIASES = AppendBlockEdit(name="kubectl-aliases", block="""\
# Kubernetes aliases
alias k="kubectl"
alias kgp="kubectl get pods"
alias kgs="kubectl get services"
alias kgd="kubectl get deployments"
alias kgn="kubectl get nodes"
alias ka="kubectl apply -f"
alias kd="kubectl describe"
alias kl="kubectl logs -f\"""")

COMPLETION = AppendBlockEdit(name="completion", block="""\
# Completion settings
zstyle ":completion:*" menu select
zstyle ":completion:*" matcher-list "m:{a-zA-Z}={A-Za-z}"
zstyle ":completion:*" list-colors "${(s.:.)LS_COLORS}"
zstyle ":completion:*" auto-description "specify: %d"
zstyle ":completion:*" format "Completing %d"
zstyle ":completion:*" group-name ""
zstyle ":completion:*" verbose true""")

DIRENV_HOOK = AppendBlockEdit(name="direnv-hook", block='eval "$(direnv hook zsh)"')


def config_blocks(
    has_tool: Callable[[str], bool],
    plugin_names: list[str],
    direnv_ready: bool,
) -> list[AppendBlockEdit]:
    """Blocks to append, in file order, for what this host has."""
    blocks: list[AppendBlockEdit] = []
    if direnv_ready:
        blocks.append(DIRENV_HOOK)
    blocks += [HISTORY, DIRECTORY_NAVIGATION]
    if "zsh-history-substring-search" in plugin_names:
        blocks.append(HISTORY_SEARCH_KEYS)
    blocks.append(ALIASES)
    if has_tool("git"):
        blocks.append(GIT_ALIASES)
    if has_tool("docker"):
        blocks.append(DOCKER_ALIASES)
    if has_tool("kubectl"):
        blocks.append(KUBECTL_ALIASES)
    blocks.append(COMPLETION)
    return blocks
