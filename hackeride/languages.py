"""Catálogo de lenguajes soportados por el editor y sus plantillas iniciales."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageConfig:
    """Configuración estática de un lenguaje del IDE."""

    id: str
    name: str
    file_extensions: tuple[str, ...]
    monaco_language: str
    default_file: str
    run_command: str
    build_command: str | None = None


LANGUAGES: tuple[LanguageConfig, ...] = (
    LanguageConfig(
        id="javascript",
        name="JavaScript",
        file_extensions=(".js", ".mjs"),
        monaco_language="javascript",
        default_file="index.js",
        run_command="node index.js",
    ),
    LanguageConfig(
        id="python",
        name="Python",
        file_extensions=(".py",),
        monaco_language="python",
        default_file="main.py",
        run_command="python main.py",
    ),
    LanguageConfig(
        id="java",
        name="Java",
        file_extensions=(".java",),
        monaco_language="java",
        default_file="Main.java",
        build_command="javac Main.java",
        run_command="java Main",
    ),
    LanguageConfig(
        id="react",
        name="React",
        file_extensions=(".jsx", ".tsx"),
        monaco_language="typescript",
        default_file="App.jsx",
        build_command="npm install",
        run_command="npm start",
    ),
    LanguageConfig(
        id="cpp",
        name="C/C++",
        file_extensions=(".cpp", ".c", ".h"),
        monaco_language="cpp",
        default_file="main.cpp",
        build_command="g++ -o main main.cpp",
        run_command="./main",
    ),
    LanguageConfig(
        id="mysql",
        name="MySQL",
        file_extensions=(".sql",),
        monaco_language="sql",
        default_file="schema.sql",
        run_command="mysql < schema.sql",
    ),
    LanguageConfig(
        id="html",
        name="HTML/CSS",
        file_extensions=(".html", ".css"),
        monaco_language="html",
        default_file="index.html",
        run_command="serve -s .",
    ),
)


def get_language(language_id: str) -> LanguageConfig | None:
    for language in LANGUAGES:
        if language.id == language_id:
            return language
    return None


_JAVASCRIPT_TEMPLATE = """// Welcome to HackerIDE - JavaScript Environment
console.log("Hello from HackerIDE!");

const express = require('express');
const app = express();

app.get('/', (req, res) => {
  res.json({
    message: 'Hello from HackerIDE!',
    timestamp: new Date().toISOString(),
    environment: 'development'
  });
});

const PORT = process.env.PORT || 3000;
app.listen(PORT, () => {
  console.log(`Server running on port ${PORT}`);
});
"""

_PYTHON_TEMPLATE = """# Welcome to HackerIDE - Python Environment
print("Hello from HackerIDE!")

from flask import Flask, jsonify
from datetime import datetime

app = Flask(__name__)

@app.route('/')
def hello():
    return jsonify({
        'message': 'Hello from HackerIDE!',
        'timestamp': datetime.now().isoformat(),
        'environment': 'development'
    })

if __name__ == '__main__':
    print("Starting Python server...")
    app.run(host='0.0.0.0', port=3000, debug=True)
"""

_JAVA_TEMPLATE = """// Welcome to HackerIDE - Java Environment
public class Main {
    public static void main(String[] args) {
        System.out.println("Hello from HackerIDE!");

        System.out.println("Starting Java application...");
        System.out.println("Server would be running on port 3000");
        System.out.println("Environment: development");

        for (int i = 1; i <= 5; i++) {
            System.out.println("Processing request " + i);
            try {
                Thread.sleep(1000);
            } catch (InterruptedException e) {
                Thread.currentThread().interrupt();
            }
        }

        System.out.println("Application completed successfully!");
    }
}
"""

_REACT_TEMPLATE = """// Welcome to HackerIDE - React Environment
import React, { useState, useEffect } from 'react';
import './App.css';

function App() {
  const [message, setMessage] = useState('Hello from HackerIDE!');
  const [timestamp, setTimestamp] = useState(new Date());

  useEffect(() => {
    const interval = setInterval(() => setTimestamp(new Date()), 1000);
    return () => clearInterval(interval);
  }, []);

  return (
    <div className="App">
      <header className="App-header">
        <h1>HackerIDE React App</h1>
        <p>{message}</p>
        <p>Current time: {timestamp.toLocaleString()}</p>
        <button onClick={() => setMessage('React is working!')}>
          Test React State
        </button>
      </header>
    </div>
  );
}

export default App;
"""

_CPP_TEMPLATE = """// Welcome to HackerIDE - C++ Environment
#include <iostream>
#include <string>
#include <chrono>
#include <thread>

int main() {
    std::cout << "Hello from HackerIDE!" << std::endl;

    std::cout << "Starting C++ application..." << std::endl;
    for (int i = 1; i <= 5; i++) {
        std::cout << "Processing step " << i << "/5" << std::endl;
        std::this_thread::sleep_for(std::chrono::milliseconds(500));
    }

    std::cout << "Application completed successfully!" << std::endl;
    return 0;
}
"""

_MYSQL_TEMPLATE = """-- Welcome to HackerIDE - MySQL Environment
CREATE DATABASE IF NOT EXISTS hackeride_db;
USE hackeride_db;

CREATE TABLE users (
    id INT PRIMARY KEY AUTO_INCREMENT,
    username VARCHAR(50) UNIQUE NOT NULL,
    email VARCHAR(100) UNIQUE NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE projects (
    id INT PRIMARY KEY AUTO_INCREMENT,
    name VARCHAR(100) NOT NULL,
    description TEXT,
    language VARCHAR(20) NOT NULL,
    user_id INT,
    FOREIGN KEY (user_id) REFERENCES users(id)
);

INSERT INTO users (username, email) VALUES
    ('hacker', 'hacker@hackeride.dev'),
    ('developer', 'dev@hackeride.dev');

SELECT p.name, p.language, u.username
FROM projects p
JOIN users u ON p.user_id = u.id;
"""

_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>HackerIDE - HTML/CSS Environment</title>
    <style>
        body { font-family: 'Courier New', monospace; background: #000; color: #00FF00; }
        .container { text-align: center; border: 2px solid #00FF00; padding: 30px; }
    </style>
</head>
<body>
    <div class="container">
        <h1>HackerIDE</h1>
        <p>Welcome to the HTML/CSS Environment</p>
        <button onclick="alert('HackerIDE is ready!')">Test JavaScript</button>
    </div>
</body>
</html>
"""

TEMPLATES: dict[str, str] = {
    "javascript": _JAVASCRIPT_TEMPLATE,
    "python": _PYTHON_TEMPLATE,
    "java": _JAVA_TEMPLATE,
    "react": _REACT_TEMPLATE,
    "cpp": _CPP_TEMPLATE,
    "mysql": _MYSQL_TEMPLATE,
    "html": _HTML_TEMPLATE,
}


def get_language_template(language: str) -> str:
    """Plantilla inicial del lenguaje; JavaScript si no se reconoce."""

    return TEMPLATES.get(language, TEMPLATES["javascript"])
