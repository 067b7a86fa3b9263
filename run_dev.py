#!/usr/bin/env python3
"""
Development server startup script for OAuth Code Login
"""
import uvicorn
import sys
import os

# Add the current directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def check_env_file():
    """Load .env file if it exists (optional)"""
    env_file = os.path.join(os.path.dirname(__file__), '.env')
    if os.path.exists(env_file):
        print("📄 Loading .env file...")
        try:
            with open(env_file, 'r') as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith('#') and '=' in line:
                        key, value = line.split('=', 1)
                        # Only set if not already in environment
                        if key not in os.environ:
                            os.environ[key] = value.strip().strip('"').strip("'")
            print("   ✅ .env file loaded")
        except OSError as e:
            print(f"   ⚠️  Error loading .env file: {e}")
    print()


def main():
    """Start the development server"""
    print("🚀 Starting OAuth Code Login Development Server")
    print("=" * 50)

    check_env_file()

    from oauth_login.utils.config import SERVER_REQUIRED_VARS, ConfigurationError, get_config

    try:
        config = get_config()
        config.validate_required_config(SERVER_REQUIRED_VARS)

        print("✅ Configuration validated successfully")
        print(f"Environment: {config.__class__.__name__}")
        print(f"Debug Mode: {config.DEBUG}")
        print(f"Server: {config.SERVER_URL}")
        print("Press Ctrl+C to stop the server")
        print("-" * 50)

        uvicorn.run(
            "oauth_login.main:app",
            host="0.0.0.0",
            port=config.PORT,
            reload=True,
            reload_dirs=["oauth_login"],
            log_level="debug" if config.DEBUG else "info",
            access_log=True
        )

    except ConfigurationError as e:
        print(f"❌ Configuration Error: {e}")
        print("\n💡 Set them in the environment or in a .env file next to run_dev.py")
        sys.exit(1)
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")


if __name__ == "__main__":
    main()
