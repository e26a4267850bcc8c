"""Shared test fixtures for blastradius."""

from __future__ import annotations

from pathlib import Path

import pytest


def write_files(root: Path, files: dict[str, str]) -> Path:
    """Write a {relative path: source} mapping under `root`."""
    for rel, source in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
    return root


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a temporary TypeScript project with a small import graph.

    app.ts -> api/routes.ts -> auth/session.ts -> lib/crypto.ts
    consumer.ts -> utils/index.ts, lib/crypto.js (ESM specifier), react
    """
    root = tmp_path.resolve() / "project"
    return write_files(root, {
        "src/lib/crypto.ts": '''// Hashing helpers
export function hashToken(value: string): string {
  return value.split("").reverse().join("");
}

export const SALT = "s", PEPPER = "p";

function unexportedHelper() {
  return SALT;
}
''',
        "src/auth/session.ts": '''import { hashToken } from "../lib/crypto";

export interface Session {
  id: string;
}

export function createSession(userId: string): Session {
  return { id: hashToken(userId) };
}

export class SessionStore {
  sessions: Session[] = [];
}
''',
        "src/api/routes.ts": '''import { createSession } from "../auth/session";

export function handleLogin(userId: string) {
  return createSession(userId);
}
''',
        "src/app.ts": '''import { handleLogin } from "./api/routes";

export default function main() {
  return handleLogin("alice");
}
''',
        "src/utils/index.ts": '''export type Id = string;

export enum Color {
  Red,
  Green,
}
''',
        "src/consumer.ts": '''import { Id } from "./utils";
import * as crypto from "./lib/crypto.js";
import React from "react";

export const current: Id = crypto.hashToken("x");
''',
        "node_modules/react/index.js": "module.exports = {};\n",
    })


@pytest.fixture
def make_project(tmp_path: Path):
    """Factory writing a named project directory under tmp_path."""

    def _make(name: str, files: dict[str, str]) -> Path:
        return write_files(tmp_path.resolve() / name, files)

    return _make


@pytest.fixture
def chain_project(tmp_path: Path) -> Path:
    """a.ts exports foo; b.ts uses foo; c.ts uses b.ts's default export only."""
    root = tmp_path.resolve() / "chain"
    return write_files(root, {
        "a.ts": "export function foo() {\n  return 1;\n}\n",
        "b.ts": (
            'import { foo } from "./a";\n\n'
            "export default function bar() {\n  return foo() + 1;\n}\n"
        ),
        "c.ts": 'import bar from "./b";\n\nexport const baz = bar();\n',
    })


@pytest.fixture
def sample_ts_source() -> bytes:
    """Sample TypeScript source for parser testing."""
    return b'''import { readFile, writeFile as write } from "fs";
import path from "path";
import * as utils from "./utils";
import Default, { named } from "./mixed";
import "./side-effect";
import fs = require("fs");

export function loadConfig(name: string) {
  return readFile(path.join(name), utils.decode);
}

export const a = 1, b = a + 1;

export class Loader extends Base {
  load() {
    return loadConfig("x");
  }
}

export interface Options {
  verbose: boolean;
}

export type Mode = "fast" | "slow";

export enum Level {
  Low,
  High,
}

function localOnly() {
  return 0;
}

const shared = 2;
export { shared };

export { other } from "./other";
'''
