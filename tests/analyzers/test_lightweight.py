"""Tests for the regex strategy."""

from __future__ import annotations

import textwrap
import time

from readmegen.analyzers import FileAnalyzer
from readmegen.analyzers.lightweight import LightweightAnalyzer
from readmegen.models import ApiRoute, FunctionInfo, ImportRef


def test_ruby_sinatra_app() -> None:
    source = textwrap.dedent(
        """
        require 'sinatra'
        require_relative 'lib/auth'

        class PaymentGateway
          def charge(amount, card)
          end
        end

        get '/orders' do
          'ok'
        end

        post '/orders' do
        end
        """
    )
    analysis = LightweightAnalyzer().analyze(source, "app.rb")

    assert analysis.strategy == "lightweight"
    assert analysis.language == "Ruby"
    assert [ref.source for ref in analysis.imports] == ["sinatra", "lib/auth"]
    assert analysis.functions == (FunctionInfo("charge", ("amount", "card")),)
    assert [cls.name for cls in analysis.classes] == ["PaymentGateway"]
    assert analysis.api_routes == (
        ApiRoute("GET", "/orders", "app.rb"),
        ApiRoute("POST", "/orders", "app.rb"),
    )
    assert {"Authentication", "Payment Processing", "REST API"} <= analysis.features_detected


def test_go_import_block_and_functions() -> None:
    source = textwrap.dedent(
        """
        package main

        import (
            "fmt"
            mux "github.com/gorilla/mux"
        )

        import "os"

        type Server struct {
            name string
        }

        func (s *Server) Start(port int, host string) error {
            return nil
        }

        func main() {
            fmt.Println("hello")
        }
        """
    )
    analysis = LightweightAnalyzer().analyze(source, "main.go")

    assert analysis.imports == (
        ImportRef("fmt"),
        ImportRef("github.com/gorilla/mux", ("mux",)),
        ImportRef("os"),
    )
    assert [fn.name for fn in analysis.functions] == ["Start", "main"]
    assert analysis.functions[0].parameters == ("port int", "host string")
    assert [cls.name for cls in analysis.classes] == ["Server"]


def test_python_regex_fallback_on_unparseable_source() -> None:
    source = "from flask import (Flask,\n    request)\nasync def login(user, password:\n"
    analysis = LightweightAnalyzer().analyze(source, "views.py")

    assert analysis.imports[0].source == "flask"
    assert analysis.imports[0].bound_names == ("Flask",)
    assert analysis.functions[0].name == "login"
    assert analysis.functions[0].is_async is True
    assert "Flask" in analysis.frameworks_detected


def test_javascript_routes_skip_http_clients() -> None:
    source = "const express = require('express');\nrouter.delete('/items/:id', remove);\naxios.get('/remote');\n"
    analysis = LightweightAnalyzer().analyze(source, "routes.vue")

    assert analysis.imports == (ImportRef("express", ("express",)),)
    assert analysis.api_routes == (ApiRoute("DELETE", "/items/:id", "routes.vue"),)


JAVA_SOURCE = """\
package com.example;

import java.util.List;
import static org.junit.Assert.assertTrue;

public class OrderService {
    private final Repo repo;

    public OrderService(Repo repo) {
        this.repo = repo;
    }

    public List<Map<String, Order>> findAll(int page, int size) throws IOException {
        return repo.all();
    }

    private static <T> T first(List<T> items) {
        return items.get(0);
    }
}
"""


def test_java_signatures() -> None:
    analysis = LightweightAnalyzer().analyze(JAVA_SOURCE, "OrderService.java")

    assert [ref.source for ref in analysis.imports] == ["java.util.List", "org.junit.Assert.assertTrue"]
    assert [cls.name for cls in analysis.classes] == ["OrderService"]
    assert [function.name for function in analysis.functions] == ["OrderService", "findAll", "first"]
    assert analysis.functions[1].parameters == ("int page", "int size")


def test_modifier_heavy_lines_scan_quickly() -> None:
    source = ("public static final int X" + " " * 40 + "\n") * 2000

    started = time.perf_counter()
    analysis = FileAnalyzer().analyze(source, "Big.java")

    assert time.perf_counter() - started < 5.0
    assert analysis.functions == ()
