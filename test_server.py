#!/usr/bin/env python3
"""
Smoke test script for a running Prizeboard API.
Checks the public endpoints and, when credentials are given, the admin login.

Usage:
    python test_server.py [BASE_URL]
    PRIZEBOARD_ADMIN_USER=admin PRIZEBOARD_ADMIN_PASSWORD=secret python test_server.py
"""

import asyncio
import os
import sys

import httpx

BASE_URL = sys.argv[1] if len(sys.argv) > 1 else "http://127.0.0.1:5000"
API_URL = f"{BASE_URL}/api"


async def test_health_endpoint():
    """Test the health check endpoint."""
    print("Testing health endpoint...")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{BASE_URL}/health")
            print(f"Status: {response.status_code}")
            print(f"Response: {response.json()}")
            return response.status_code == 200
        except Exception as e:
            print(f"Health check failed: {e}")
            return False


async def test_root_endpoint():
    """Test the root endpoint."""
    print("\nTesting root endpoint...")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{BASE_URL}/")
            print(f"Status: {response.status_code}")
            print(f"Response: {response.json()}")
            return response.status_code == 200
        except Exception as e:
            print(f"Root endpoint failed: {e}")
            return False


async def test_prizes():
    """Test the prize page payload shape."""
    print("\nTesting prize page...")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_URL}/prizes")
            data = response.json()
            print(f"Status: {response.status_code}")
            print(
                f"current={len(data.get('current', []))} "
                f"upcoming={len(data.get('upcoming', []))} "
                f"history={len(data.get('history', []))}"
            )
            print(f"Stats: {data.get('stats')}")
            print(f"Config: {data.get('config')}")
            return response.status_code == 200 and {"current", "upcoming", "history"} <= set(data)
        except Exception as e:
            print(f"Prize page failed: {e}")
            return False


async def test_stats():
    """Test the global stats endpoint."""
    print("\nTesting stats...")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_URL}/stats")
            print(f"Status: {response.status_code}")
            print(f"Response: {response.json()}")
            return response.status_code == 200
        except Exception as e:
            print(f"Stats failed: {e}")
            return False


async def test_admin_requires_token():
    """Admin endpoints must reject anonymous calls."""
    print("\nTesting admin auth guard...")

    async with httpx.AsyncClient() as client:
        try:
            response = await client.get(f"{API_URL}/winners")
            print(f"Status: {response.status_code}")
            return response.status_code == 401
        except Exception as e:
            print(f"Auth guard check failed: {e}")
            return False


async def test_admin_login():
    """Log in with the credentials from the environment, if any."""
    print("\nTesting admin login...")

    username = os.getenv("PRIZEBOARD_ADMIN_USER")
    password = os.getenv("PRIZEBOARD_ADMIN_PASSWORD")
    if not username or not password:
        print("Skipped: set PRIZEBOARD_ADMIN_USER and PRIZEBOARD_ADMIN_PASSWORD")
        return True

    async with httpx.AsyncClient() as client:
        try:
            response = await client.post(
                f"{API_URL}/admin/login",
                json={"username": username, "password": password}
            )
            print(f"Status: {response.status_code}")
            if response.status_code != 200:
                print(f"Response: {response.json()}")
                return False

            token = response.json()["token"]
            me = await client.get(
                f"{API_URL}/admin/me",
                headers={"Authorization": f"Bearer {token}"}
            )
            print(f"Me: {me.json()}")
            return me.status_code == 200
        except Exception as e:
            print(f"Login failed: {e}")
            return False


async def run_all_tests():
    """Run all tests sequentially."""
    print("Starting Prizeboard API smoke tests")
    print("=" * 60)

    tests = [
        ("Health Check", test_health_endpoint),
        ("Root Endpoint", test_root_endpoint),
        ("Prize Page", test_prizes),
        ("Stats", test_stats),
        ("Admin Guard", test_admin_requires_token),
        ("Admin Login", test_admin_login),
    ]

    results = []

    for test_name, test_func in tests:
        print(f"\n{'=' * 20} {test_name} {'=' * 20}")
        try:
            result = await test_func()
            results.append((test_name, result))
        except Exception as e:
            print(f"{test_name} crashed: {e}")
            results.append((test_name, False))

    # Summary
    print(f"\n{'=' * 60}")
    print("TEST SUMMARY")
    print("=" * 60)

    passed = sum(1 for _, result in results if result)
    total = len(results)

    for test_name, result in results:
        status = "PASS" if result else "FAIL"
        print(f"{test_name:.<30} {status}")

    print(f"\nTotal: {passed}/{total} tests passed")
    return passed == total


if __name__ == "__main__":
    print(f"Make sure the server is running on {BASE_URL}")
    print("Run: python run.py")
    print()

    try:
        ok = asyncio.run(run_all_tests())
        sys.exit(0 if ok else 1)
    except KeyboardInterrupt:
        print("\nTests interrupted by user")
