"""Shared sample documents for core unit tests"""

import pytest


CARDS_MD = """\
---
topic: javascript
---

# JavaScript Flashcards

Short introduction that belongs to no card.

## Card 1: Hoisting

**Q:** What is hoisting?

**A:** Declarations are moved to the top of their scope.

**Difficulty:** 🟢 Easy
**Frequency:** ⭐⭐⭐⭐⭐
**Tags:** #javascript #scope

---

## Card 2: Broken card

**Q:** Where did the answer go?

---

## Card 3: Closures

**Q:** What is a closure?

**A:** A function bundled with its lexical environment.

```js
function outer() { const x = 1; return () => x; }
```

---
"""

QUESTIONS_MD = """\
# JavaScript Interview Questions

## Question 1: What is hoisting?

Hoisting moves declarations to the top of their scope.

<details>
<summary>Show answer</summary>

Variables declared with `var` are hoisted and initialized to `undefined`.

</details>

## Question 2: Explain closures

### Example

Closures capture the surrounding scope.
"""


@pytest.fixture(name="cards_md")
def cards_md_fixture():
    return CARDS_MD


@pytest.fixture(name="questions_md")
def questions_md_fixture():
    return QUESTIONS_MD
